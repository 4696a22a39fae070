"""
Unit tests for ConcurrencyControlService and concurrent room writes.
"""

import random
import threading
import time

from src.services.concurrency_control_service import ConcurrencyControlService
from tests.helpers.game_helpers import seat_players


class TestConcurrencyControlService:
    """Test per-room locking."""

    def setup_method(self):
        self.service = ConcurrencyControlService()

    def test_same_room_shares_lock(self):
        assert self.service.get_room_lock('ABCDEF') is self.service.get_room_lock('ABCDEF')
        assert self.service.get_room_lock('ABCDEF') is not self.service.get_room_lock('GHJKLM')

    def test_cleanup_room_lock(self):
        self.service.get_room_lock('ABCDEF')
        assert self.service.active_lock_count() == 1

        self.service.cleanup_room_lock('ABCDEF')
        self.service.cleanup_room_lock('ABCDEF')

        assert self.service.active_lock_count() == 0

    def test_room_operation_is_reentrant(self):
        with self.service.room_operation('ABCDEF'):
            with self.service.room_operation('ABCDEF'):
                pass

    def test_room_operations_serialize(self):
        events = []

        def worker(name):
            with self.service.room_operation('ABCDEF'):
                events.append(f"{name}-start")
                time.sleep(0.01)
                events.append(f"{name}-end")

        threads = [threading.Thread(target=worker, args=(f"t{i}",)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Every start is immediately followed by its own end
        for i in range(0, len(events), 2):
            assert events[i].split('-')[0] == events[i + 1].split('-')[0]


class TestConcurrentRoomWrites:
    """Concurrent requests against one room are applied one at a time."""

    def test_parallel_joins_are_all_recorded(self, game_manager):
        room_code, _ = seat_players(game_manager, 1)
        results = []

        def join(i):
            results.append(game_manager.join_room(room_code, f"Racer {i}"))

        threads = [threading.Thread(target=join, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(r.success for r in results)
        state = game_manager.get_state(room_code)
        assert len(state.players) == 9
        assert state.version == 9

    def test_parallel_joins_respect_capacity(self, room_manager, card_catalog):
        from config_factory import AppConfig
        from src.config.game_settings import GameSettings
        from src.game_manager import GameManager

        settings = GameSettings(AppConfig(min_players_required=1, max_players_per_room=4))
        manager = GameManager(room_manager, card_catalog, settings, rng=random.Random(1))
        room_code, _ = seat_players(manager, 1)
        results = []

        def join(i):
            results.append(manager.join_room(room_code, f"Racer {i}"))

        threads = [threading.Thread(target=join, args=(i,)) for i in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(1 for r in results if r.success) == 3
        assert len(manager.get_state(room_code).players) == 4
