"""
Service container for Crime Scene.

Every long-lived object (settings, card catalog, room store, managers) is
registered here with the names of the services it is constructed from, and
built lazily, once, on first lookup.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import inspect


@dataclass
class ServiceDefinition:
    name: str
    factory: Callable
    dependencies: List[str] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)


class CircularDependencyError(Exception):
    pass


class ServiceNotFoundError(Exception):
    pass


def _create_game_settings(container_config: Dict[str, Any]):
    from config_factory import AppConfig, Environment
    from src.config.game_settings import GameSettings

    if not container_config:
        return GameSettings()

    fields = {k: v for k, v in container_config.items() if k in AppConfig.__dataclass_fields__}
    if isinstance(fields.get('environment'), str):
        fields['environment'] = Environment(fields['environment'])
    return GameSettings(AppConfig(**fields))


def _create_card_catalog(container_config: Dict[str, Any]):
    from src.card_catalog import CardCatalog

    catalog = CardCatalog(container_config.get('cards_file'))
    catalog.load_cards_from_yaml()
    return catalog


class ServiceContainer:
    """
    Registry of service factories and the instances built from them.

    Classes are called with their resolved dependencies as positional
    arguments; plain functions additionally receive the definition's config
    as keyword arguments.
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._resolving: List[str] = []
        self._config: Dict[str, Any] = {}

    def register(self, name: str, factory: Callable, dependencies: Optional[List[str]] = None,
                 config: Optional[Dict[str, Any]] = None) -> 'ServiceContainer':
        """
        Register a service factory under a name.

        Raises:
            ValueError: If the name is taken or the factory is not callable
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")
        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._services[name] = ServiceDefinition(
            name, factory, list(dependencies or []), dict(config or {})
        )
        return self

    def configure_services(self) -> 'ServiceContainer':
        """Register the Crime Scene services."""
        from src.room_manager import RoomManager
        from src.game_manager import GameManager
        from src.services.room_store import InMemoryRoomStore
        from src.services.validation_service import ValidationService
        from src.services.error_response_factory import ErrorResponseFactory
        from src.services.room_state_presenter import RoomStatePresenter

        # Built from the loaded configuration
        self.register('GameSettings', _create_game_settings, config={'container_config': self._config})
        self.register('CardCatalog', _create_card_catalog, config={'container_config': self._config})

        self.register('ValidationService', ValidationService, dependencies=['GameSettings'])
        self.register('ErrorResponseFactory', ErrorResponseFactory)

        self.register('RoomStore', InMemoryRoomStore)
        self.register('RoomManager', RoomManager, dependencies=['RoomStore', 'GameSettings'])
        self.register('GameManager', GameManager, dependencies=['RoomManager', 'CardCatalog', 'GameSettings'])

        self.register('RoomStatePresenter', RoomStatePresenter, dependencies=['CardCatalog'])

        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """Provide a ready-made instance, e.g. a RoomStore shared between processes."""
        self._instances[name] = instance
        return self

    def set_config(self, config: Dict[str, Any]) -> 'ServiceContainer':
        self._config.update(config)
        return self

    def get(self, name: str) -> Any:
        """
        Look up a service, building it and its dependencies on first use.

        Raises:
            ServiceNotFoundError: If service is not registered
            CircularDependencyError: If the service depends on itself
        """
        if name in self._instances:
            return self._instances[name]
        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")
        if name in self._resolving:
            chain = ' -> '.join(self._resolving + [name])
            raise CircularDependencyError(f"Circular dependency detected: {chain}")

        definition = self._services[name]
        self._resolving.append(name)
        try:
            args = [self.get(dependency) for dependency in definition.dependencies]
        finally:
            self._resolving.pop()

        if inspect.isclass(definition.factory):
            instance = definition.factory(*args)
        else:
            instance = definition.factory(*args, **definition.config)

        self._instances[name] = instance
        return instance

    def has_service(self, name: str) -> bool:
        return name in self._services

    def get_service_names(self) -> List[str]:
        return list(self._services)

    def validate_dependencies(self) -> Dict[str, List[str]]:
        """Map each service to the dependencies nothing provides; empty when wiring is complete."""
        issues = {}
        for name, definition in self._services.items():
            missing = [
                dependency for dependency in definition.dependencies
                if dependency not in self._services and dependency not in self._instances
            ]
            if missing:
                issues[name] = missing
        return issues

    def clear(self) -> 'ServiceContainer':
        self._services.clear()
        self._instances.clear()
        self._resolving.clear()
        self._config.clear()
        return self

    def __repr__(self) -> str:
        return f"ServiceContainer(services={len(self._services)}, instances={len(self._instances)})"


# Global container instance for the application
_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global application service container"""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def reset_container() -> None:
    """Drop the global container (for testing)"""
    global _app_container
    _app_container = None


def configure_container(config=None, room_store=None) -> ServiceContainer:
    """
    Configure the global service container with Crime Scene services.

    Args:
        config: Application configuration dictionary
        room_store: Optional RoomStore to use instead of the in-memory store

    Returns:
        Configured service container
    """
    container = get_container()
    container.clear()

    if config is not None:
        container.set_config(config)

    if room_store is not None:
        container.set_external_dependency('RoomStore', room_store)

    container.configure_services()

    return container
