"""
Room Manager for Crime Scene

Sits between the game rules and the room store. Allocates room codes and
provides the per-room serialization point: every state write happens inside
``room_operation`` and is checked against the version it was read at.
"""

import logging
import random
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Callable, Optional

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, GameRuleError
from src.core.game_state import GameState
from src.services.concurrency_control_service import ConcurrencyControlService
from src.services.room_store import InMemoryRoomStore, RoomStore, room_key

logger = logging.getLogger(__name__)

# No 0/O/1/I so codes can be read aloud and typed without ambiguity
ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
ROOM_CODE_LENGTH = 6


class RoomManager:
    """Manages room records and their lifecycle with thread-safe operations."""

    def __init__(self, room_store: Optional[RoomStore] = None, game_settings=None,
                 rng: Optional[random.Random] = None):
        self.store = room_store if room_store is not None else InMemoryRoomStore()
        self.game_settings = game_settings or get_game_settings()
        self.concurrency_control = ConcurrencyControlService()
        self._create_lock = threading.Lock()
        self._rng = rng or random.Random()

    def generate_room_code(self) -> str:
        """Generate a random room code from the unambiguous alphabet."""
        return ''.join(self._rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))

    def create_room(self, build_state: Callable[[str], GameState]) -> GameState:
        """
        Allocate an unused room code and persist the room's first state.

        Args:
            build_state: Called with the allocated code, returns the initial state

        Returns:
            The persisted GameState

        Raises:
            RuntimeError: If no free room code was found
        """
        with self._create_lock:
            for _ in range(self.game_settings.room_code_attempts):
                room_code = self.generate_room_code()
                if not self.store.exists(room_key(room_code)):
                    break
            else:
                raise RuntimeError("Could not allocate a free room code")

            state = replace(build_state(room_code), version=1)
            self.store.set(room_key(room_code), state.to_dict())

        logger.info(f"Created room {room_code}")
        return state

    def room_exists(self, room_code: str) -> bool:
        """Check if a room exists."""
        return self.store.exists(room_key(room_code))

    def get_room_state(self, room_code: str) -> Optional[GameState]:
        """
        Load the current state of a room.

        Returns:
            GameState or None if room doesn't exist
        """
        data = self.store.get(room_key(room_code))
        if data is None:
            return None
        return GameState.from_dict(data)

    def save_room_state(self, state: GameState, expected_version: int) -> GameState:
        """
        Persist a new state if the stored record is still at expected_version.

        Args:
            state: New state to write
            expected_version: Version the state was derived from

        Returns:
            The stored state with its bumped version

        Raises:
            GameRuleError: If the room vanished or was written concurrently
        """
        with self.room_operation(state.room_code):
            key = room_key(state.room_code)
            current = self.store.get(key)
            if current is None:
                raise GameRuleError(ErrorCode.ROOM_NOT_FOUND, f"Room {state.room_code} not found")

            stored_version = current.get('version', 0)
            if stored_version != expected_version:
                logger.warning(
                    f"Concurrent write rejected for room {state.room_code}: "
                    f"expected version {expected_version}, found {stored_version}"
                )
                raise GameRuleError(
                    ErrorCode.CONCURRENT_MODIFICATION,
                    "The room changed while your request was processed, please retry",
                    {"expected_version": expected_version, "stored_version": stored_version}
                )

            saved = replace(state, version=expected_version + 1)
            self.store.set(key, saved.to_dict())
            return saved

    def delete_room(self, room_code: str) -> bool:
        """
        Delete a room and clean up its resources.

        Returns:
            True if room was deleted, False if room didn't exist
        """
        with self.room_operation(room_code):
            result = self.store.delete(room_key(room_code))
        if result:
            logger.info(f"Deleted room {room_code}")
        return result

    @contextmanager
    def room_operation(self, room_code: str):
        """
        Hold the room's lock for a whole read-modify-write cycle.

        On exit the lock is dropped if no room is stored under the code, so
        operations on unknown or deleted rooms leave no lock behind.
        """
        with self.concurrency_control.room_operation(room_code):
            try:
                yield
            finally:
                if not self.store.exists(room_key(room_code)):
                    self.concurrency_control.cleanup_room_lock(room_code)
