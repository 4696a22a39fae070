"""
Configuration for Crime Scene.

AppConfig holds every setting the server reads: Flask, the game rules, the
optional API token and the gunicorn worker model. ConfigurationFactory loads
it once per process from environment variables (or a dict in tests).
"""

import os
import logging
from typing import Any, Dict, Optional
from enum import Enum
from dataclasses import asdict, dataclass

DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'


class Environment(Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Raised for missing or out-of-range configuration."""
    pass


# Inclusive (low, high) bounds checked on every AppConfig; None means unbounded
SETTING_BOUNDS = {
    'port': (1, 65535),
    'max_players_per_room': (1, 50),
    'table_cards_per_type': (1, 12),
    'max_player_name_length': (1, 100),
    'room_code_attempts': (1, None),
    'workers': (1, None),
    'threads': (1, None),
    'timeout': (1, None),
}


@dataclass
class AppConfig:
    """Validated application settings."""

    # Flask
    secret_key: str = DEFAULT_SECRET_KEY
    debug: bool = False
    flask_env: str = 'development'
    host: str = '0.0.0.0'
    port: int = 5000

    # Game rules
    min_players_required: int = 4  # 1 enables the solo murderer-only debug mode
    max_players_per_room: int = 12
    table_cards_per_type: int = 4
    max_player_name_length: int = 20
    room_code_attempts: int = 20  # retries when a generated code collides
    cards_file: str = 'cards.yaml'

    # Bearer token required on /api/* when set
    api_token: Optional[str] = None

    # Gunicorn; the in-memory room store lives in one process
    workers: int = 1
    threads: int = 8
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        self._validate()

    def _validate(self):
        for name, (low, high) in SETTING_BOUNDS.items():
            value = getattr(self, name)
            if value < low or (high is not None and value > high):
                raise ConfigError(f"Invalid {name}: {value}")

        # The minimum is bounded by the configured maximum
        if not 1 <= self.min_players_required <= self.max_players_per_room:
            raise ConfigError(f"Invalid min_players_required: {self.min_players_required}")

        if self.environment == Environment.PRODUCTION and self.secret_key == DEFAULT_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

# Environment variable -> AppConfig field. Unset variables keep the dataclass default.
ENVIRONMENT_FIELDS = {
    'SECRET_KEY': 'secret_key',
    'DEBUG': 'debug',
    'HOST': 'host',
    'PORT': 'port',
    'MIN_PLAYERS_REQUIRED': 'min_players_required',
    'MAX_PLAYERS_PER_ROOM': 'max_players_per_room',
    'TABLE_CARDS_PER_TYPE': 'table_cards_per_type',
    'MAX_PLAYER_NAME_LENGTH': 'max_player_name_length',
    'ROOM_CODE_ATTEMPTS': 'room_code_attempts',
    'API_TOKEN': 'api_token',
    'CARDS_FILE': 'cards_file',
    'WORKERS': 'workers',
    'THREADS': 'threads',
    'TIMEOUT': 'timeout',
    'KEEPALIVE': 'keepalive',
    'LOG_LEVEL': 'log_level',
}

FLASK_ENVIRONMENTS = {
    'development': Environment.DEVELOPMENT,
    'testing': Environment.TESTING,
}


class ConfigurationFactory:
    """
    Singleton holding the application configuration.

    Configuration comes from environment variables in deployment and from a
    dictionary in tests; either way it is validated by AppConfig.
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, '_initialized'):
            self._logger = logging.getLogger(__name__)
            self._overrides: Dict[str, Any] = {}
            self._initialized = True

    def _convert(self, env_key: str, raw: str, default: Any) -> Any:
        """Convert a raw environment string to the type of the field default."""
        if isinstance(default, bool):
            return raw.lower() in ('true', '1', 'yes', 'on')
        if isinstance(default, int):
            try:
                return int(raw)
            except ValueError:
                self._logger.warning(f"Invalid integer value for {env_key}: {raw}, using default: {default}")
                return default
        # Empty strings mean unset for optional values such as API_TOKEN
        return raw or default

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Load configuration from environment variables.

        FLASK_ENV selects the environment: 'development' and 'testing' enable
        debug, anything else is production.

        Args:
            env_prefix: Optional prefix for environment variables (e.g., 'CRIMESCENE_')

        Returns:
            Configured AppConfig instance
        """
        defaults = AppConfig()
        flask_env = os.environ.get(f"{env_prefix}FLASK_ENV", 'development')
        environment = FLASK_ENVIRONMENTS.get(flask_env, Environment.PRODUCTION)

        values: Dict[str, Any] = {
            'flask_env': flask_env,
            'environment': environment,
            'debug': environment != Environment.PRODUCTION,
        }
        for env_key, field_name in ENVIRONMENT_FIELDS.items():
            raw = os.environ.get(f"{env_prefix}{env_key}")
            if raw is not None:
                values[field_name] = self._convert(env_key, raw, getattr(defaults, field_name))
        values.update(self._overrides)

        self._config = AppConfig(**values)
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return self._config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Load configuration from a dictionary of AppConfig fields (used by tests)."""
        values = dict(config_dict)
        if isinstance(values.get('environment'), str):
            values['environment'] = Environment(values['environment'])

        self._config = AppConfig(**values)
        return self._config

    def override_setting(self, key: str, value: Any) -> 'ConfigurationFactory':
        """
        Override one setting, now and on later environment loads.

        Raises:
            ConfigError: If the overridden configuration is invalid
        """
        self._overrides[key] = value
        if self._config is not None and hasattr(self._config, key):
            setattr(self._config, key, value)
            self._config._validate()
        return self

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Raises:
            ConfigError: If no configuration has been loaded
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() or load_from_dict() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        """Forget the loaded configuration and overrides (for testing)"""
        self._config = None
        self._overrides.clear()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Current configuration as plain values, the form handed to the service container"""
        values = asdict(self.get_config())
        values['environment'] = self._config.environment.value
        return values

    def get_flask_config(self) -> Dict[str, Any]:
        """Flask settings for app.config.update()"""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
            'MIN_PLAYERS_REQUIRED': config.min_players_required,
            'MAX_PLAYERS_PER_ROOM': config.max_players_per_room,
            'API_TOKEN': config.api_token,
            'CARDS_FILE': config.cards_file,
        }


# Global factory instance
_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    """Load configuration from environment variables"""
    return _config_factory.load_from_environment(env_prefix)


def load_config_from_dict(config_dict: Dict[str, Any]) -> AppConfig:
    return _config_factory.load_from_dict(config_dict)


def override_config(key: str, value: Any) -> ConfigurationFactory:
    return _config_factory.override_setting(key, value)


def reset_config() -> ConfigurationFactory:
    """Reset configuration (for testing)"""
    return _config_factory.reset()
