"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import os
import random

import pytest

# Ensure testing environment
os.environ.setdefault('FLASK_ENV', 'testing')

from config_factory import AppConfig, Environment, reset_config
from src.config.game_settings import GameSettings, reset_game_settings
from tests.helpers.app_helpers import TEST_CONFIG


@pytest.fixture(scope="function", autouse=True)
def reset_global_state():
    """Reset global configuration singletons before each test to ensure clean state."""
    from container import reset_container

    reset_container()
    reset_game_settings()
    yield
    reset_config()


@pytest.fixture(scope="function")
def app_config():
    """Testing configuration that allows solo rooms."""
    return AppConfig(
        environment=Environment.TESTING,
        flask_env='testing',
        min_players_required=1,
        max_players_per_room=12
    )


@pytest.fixture(scope="function")
def game_settings(app_config):
    """GameSettings bound to the testing configuration."""
    return GameSettings(app_config)


@pytest.fixture(scope="session")
def card_catalog():
    """Card catalog loaded from the bundled cards.yaml."""
    from src.card_catalog import CardCatalog

    catalog = CardCatalog()
    catalog.load_cards_from_yaml()
    return catalog


@pytest.fixture(scope="function")
def room_store():
    from src.services.room_store import InMemoryRoomStore
    return InMemoryRoomStore()


@pytest.fixture(scope="function")
def room_manager(room_store, game_settings):
    """Provide RoomManager over a fresh in-memory store."""
    from src.room_manager import RoomManager
    return RoomManager(room_store, game_settings, rng=random.Random(7))


@pytest.fixture(scope="function")
def game_manager(room_manager, card_catalog, game_settings):
    """Provide GameManager with a seeded random source."""
    from src.game_manager import GameManager
    return GameManager(room_manager, card_catalog, game_settings, rng=random.Random(42))


@pytest.fixture(scope="function")
def app():
    """Create Flask app for testing."""
    from app import create_app
    return create_app(dict(TEST_CONFIG))


@pytest.fixture(scope="function")
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture(scope="function")
def container():
    """Create service container with the testing configuration."""
    from container import configure_container
    return configure_container(config=dict(TEST_CONFIG))
