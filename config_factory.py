"""
Configuration for the round server

`AppConfig` holds every setting with its default and validates itself on
construction. `ConfigurationFactory` builds it from environment variables
(or a dict in tests) and keeps the loaded instance for the rest of the process.
"""

import os
import logging
from typing import Any, Callable, Dict, Optional
from enum import Enum
from dataclasses import dataclass

DEV_SECRET_KEY = 'dev-secret-key-change-in-production'


class Environment(Enum):
    """Environment types for configuration"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


@dataclass
class AppConfig:
    """Round server settings"""

    # Flask
    secret_key: str = DEV_SECRET_KEY
    debug: bool = False
    flask_env: str = 'development'

    # Socket.IO server
    host: str = '0.0.0.0'
    port: int = 5000

    # Round
    round_duration_seconds: float = 60.0
    timer_poll_interval: float = 0.5
    min_players_required: int = 2
    broadcast_room: str = 'round'

    # Gunicorn
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        if not 1 <= self.port <= 65535:
            raise ConfigError(f"Invalid port number: {self.port}")

        if not 1 <= self.round_duration_seconds <= 3600:
            raise ConfigError(f"Invalid round_duration_seconds: {self.round_duration_seconds}")

        # The countdown must get at least one check in before the round is due
        if not 0 < self.timer_poll_interval <= self.round_duration_seconds:
            raise ConfigError(f"Invalid timer_poll_interval: {self.timer_poll_interval}")

        if not 1 <= self.min_players_required <= 100:
            raise ConfigError(f"Invalid min_players_required: {self.min_players_required}")

        if not self.broadcast_room:
            raise ConfigError("broadcast_room must not be empty")

        if self.is_production and self.secret_key == DEV_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


def _parse_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes', 'on')


# Environment variable -> (AppConfig field, parser)
ENV_SETTINGS: Dict[str, tuple] = {
    'SECRET_KEY': ('secret_key', str),
    'DEBUG': ('debug', _parse_bool),
    'HOST': ('host', str),
    'PORT': ('port', int),
    'ROUND_DURATION_SECONDS': ('round_duration_seconds', float),
    'TIMER_POLL_INTERVAL': ('timer_poll_interval', float),
    'MIN_PLAYERS_REQUIRED': ('min_players_required', int),
    'BROADCAST_ROOM': ('broadcast_room', str),
    'WORKER_CONNECTIONS': ('worker_connections', int),
    'TIMEOUT': ('timeout', int),
    'KEEPALIVE': ('keepalive', int),
    'LOG_LEVEL': ('log_level', str),
}


class ConfigurationFactory:
    """Singleton that loads and holds the process-wide AppConfig."""

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._logger = logging.getLogger(__name__)
        return cls._instance

    def load_from_environment(self) -> AppConfig:
        """
        Build the configuration from environment variables.

        FLASK_ENV selects the environment ('development', 'testing', anything
        else is production) and the DEBUG default. Values that fail to parse
        are logged and replaced by the field default.
        """
        flask_env = os.environ.get('FLASK_ENV', 'development')
        if flask_env == 'development':
            environment = Environment.DEVELOPMENT
        elif flask_env == 'testing':
            environment = Environment.TESTING
        else:
            environment = Environment.PRODUCTION

        settings: Dict[str, Any] = {
            'flask_env': flask_env,
            'environment': environment,
            'debug': environment != Environment.PRODUCTION,
        }
        for env_key, (field_name, parse) in ENV_SETTINGS.items():
            value = self._read_env(env_key, parse)
            if value is not None:
                settings[field_name] = value

        self._config = AppConfig(**settings)
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return self._config

    def _read_env(self, env_key: str, parse: Callable[[str], Any]) -> Any:
        raw = os.environ.get(env_key)
        if raw is None:
            return None
        try:
            return parse(raw)
        except ValueError:
            self._logger.warning(f"Invalid value for {env_key}: {raw}, using default")
            return None

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build the configuration from explicit field values (tests)."""
        self._config = AppConfig(**config_dict)
        return self._config

    def get_config(self) -> AppConfig:
        """
        Get the loaded configuration.

        Raises:
            ConfigError: If no configuration has been loaded
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() or load_from_dict() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        self._config = None
        return self

    def get_flask_config(self) -> Dict[str, Any]:
        """Settings for Flask's app.config.update()"""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
            'ROUND_DURATION_SECONDS': config.round_duration_seconds,
            'TIMER_POLL_INTERVAL': config.timer_poll_interval,
            'MIN_PLAYERS_REQUIRED': config.min_players_required,
        }


# Global factory instance
_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return _config_factory.get_config()


def load_config() -> AppConfig:
    """Load configuration from environment variables"""
    return _config_factory.load_from_environment()


def load_config_from_dict(config_dict: Dict[str, Any]) -> AppConfig:
    """Load configuration from dictionary"""
    return _config_factory.load_from_dict(config_dict)


def reset_config() -> ConfigurationFactory:
    """Reset configuration (for testing)"""
    return _config_factory.reset()
