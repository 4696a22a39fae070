"""
Service Container Tests
Tests for dependency registration, resolution and the application wiring.
"""

import pytest

from container import (
    CircularDependencyError, ServiceContainer, ServiceNotFoundError,
    configure_container, get_container
)
from src.card_catalog import CardCatalog
from src.game_manager import GameManager
from src.services.room_store import InMemoryRoomStore


class Dependency:
    pass


class Consumer:
    def __init__(self, dependency):
        self.dependency = dependency


class TestServiceContainer:
    """Test the generic container behaviour"""

    def setup_method(self):
        self.container = ServiceContainer()

    def test_resolves_dependencies(self):
        self.container.register('Dependency', Dependency)
        self.container.register('Consumer', Consumer, dependencies=['Dependency'])

        consumer = self.container.get('Consumer')

        assert isinstance(consumer.dependency, Dependency)
        assert self.container.get('Consumer') is consumer

    def test_function_factory_receives_config(self):
        self.container.register('Value', lambda scale: 3 * scale, config={'scale': 2})

        assert self.container.get('Value') == 6

    def test_duplicate_registration(self):
        self.container.register('Dependency', Dependency)

        with pytest.raises(ValueError, match="already registered"):
            self.container.register('Dependency', Dependency)

    def test_unknown_service(self):
        with pytest.raises(ServiceNotFoundError):
            self.container.get('Missing')

    def test_circular_dependency(self):
        self.container.register('A', Consumer, dependencies=['B'])
        self.container.register('B', Consumer, dependencies=['A'])

        with pytest.raises(CircularDependencyError):
            self.container.get('A')

    def test_validate_dependencies(self):
        self.container.register('Consumer', Consumer, dependencies=['Dependency'])

        assert self.container.validate_dependencies() == {'Consumer': ['Dependency']}


class TestApplicationWiring:
    """Test configure_container"""

    def test_all_services_resolve(self, container):
        assert container.validate_dependencies() == {}
        for name in container.get_service_names():
            assert container.get(name) is not None

        assert isinstance(container.get('CardCatalog'), CardCatalog)
        assert container.get('CardCatalog').is_loaded()

    def test_shared_singletons(self, container):
        game_manager = container.get('GameManager')

        assert isinstance(game_manager, GameManager)
        assert game_manager.room_manager is container.get('RoomManager')
        assert game_manager.card_catalog is container.get('CardCatalog')
        assert container.get('RoomManager').store is container.get('RoomStore')

    def test_settings_follow_config(self, container):
        assert container.get('GameSettings').min_players_required == 1

    def test_external_room_store(self):
        store = InMemoryRoomStore()

        container = configure_container(config={'environment': 'testing'}, room_store=store)

        assert container.get('RoomManager').store is store
        assert get_container() is container
