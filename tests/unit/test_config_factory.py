"""
Configuration Factory Tests
Tests for the centralized configuration management system.
"""

import pytest
import os
from unittest.mock import patch
from config_factory import (
    ConfigurationFactory, AppConfig, Environment, ConfigError,
    load_config, load_config_from_dict, get_config, reset_config
)
from src.config.round_settings import RoundSettings, get_round_settings, reset_round_settings


class TestAppConfig:
    """Test AppConfig dataclass"""

    def test_config_initialization_with_defaults(self):
        """Test AppConfig initialization with default values"""
        config = AppConfig()

        assert config.secret_key == 'dev-secret-key-change-in-production'
        assert config.debug == False
        assert config.flask_env == 'development'
        assert config.host == '0.0.0.0'
        assert config.port == 5000
        assert config.round_duration_seconds == 60.0
        assert config.timer_poll_interval == 0.5
        assert config.min_players_required == 2
        assert config.broadcast_room == 'round'
        assert config.environment == Environment.DEVELOPMENT

    def test_config_initialization_with_custom_values(self):
        """Test AppConfig initialization with custom values"""
        config = AppConfig(
            secret_key='custom-secret',
            debug=True,
            port=3000,
            round_duration_seconds=90,
            min_players_required=4
        )

        assert config.secret_key == 'custom-secret'
        assert config.debug == True
        assert config.port == 3000
        assert config.round_duration_seconds == 90
        assert config.min_players_required == 4

    def test_config_validation_invalid_port(self):
        """Test validation fails for invalid port numbers"""
        with pytest.raises(ConfigError, match="Invalid port number"):
            AppConfig(port=0)

        with pytest.raises(ConfigError, match="Invalid port number"):
            AppConfig(port=70000)

    def test_config_validation_invalid_round_duration(self):
        """Test validation fails for round durations outside 1s-1h"""
        with pytest.raises(ConfigError, match="Invalid round_duration_seconds"):
            AppConfig(round_duration_seconds=0.5)

        with pytest.raises(ConfigError, match="Invalid round_duration_seconds"):
            AppConfig(round_duration_seconds=4000)

    def test_config_validation_invalid_poll_interval(self):
        """Test validation fails for non-positive or oversized poll intervals"""
        with pytest.raises(ConfigError, match="Invalid timer_poll_interval"):
            AppConfig(timer_poll_interval=0)

        with pytest.raises(ConfigError, match="Invalid timer_poll_interval"):
            AppConfig(round_duration_seconds=10, timer_poll_interval=11)

    def test_config_validation_min_players_required(self):
        """Test validation of the round quorum"""
        with pytest.raises(ConfigError, match="Invalid min_players_required"):
            AppConfig(min_players_required=0)

        with pytest.raises(ConfigError, match="Invalid min_players_required"):
            AppConfig(min_players_required=101)

    def test_config_validation_empty_broadcast_room(self):
        with pytest.raises(ConfigError, match="broadcast_room"):
            AppConfig(broadcast_room='')

    def test_config_validation_production_secret_key(self):
        """Test that production rejects the development secret key"""
        with pytest.raises(ConfigError, match="Production environment requires a secure SECRET_KEY"):
            AppConfig(environment=Environment.PRODUCTION)

    def test_is_production(self):
        assert AppConfig(environment=Environment.PRODUCTION, secret_key='secure-key').is_production
        assert not AppConfig(environment=Environment.TESTING).is_production


class TestConfigurationFactory:
    """Test ConfigurationFactory class"""

    def setup_method(self):
        """Setup for each test method"""
        self.factory = ConfigurationFactory()
        self.factory.reset()

    def test_singleton_pattern(self):
        """Test that ConfigurationFactory implements singleton pattern"""
        assert ConfigurationFactory() is ConfigurationFactory()

    def test_load_from_environment_development(self):
        """Test loading configuration from environment variables for development"""
        env_vars = {
            'FLASK_ENV': 'development',
            'SECRET_KEY': 'dev-secret-123',
            'PORT': '3000',
            'DEBUG': 'true'
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = self.factory.load_from_environment()

        assert config.environment == Environment.DEVELOPMENT
        assert config.debug == True
        assert config.secret_key == 'dev-secret-123'
        assert config.port == 3000

    def test_load_from_environment_production(self):
        """Test loading configuration from environment variables for production"""
        env_vars = {
            'FLASK_ENV': 'production',
            'SECRET_KEY': 'super-secure-production-key',
            'PORT': '8080'
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = self.factory.load_from_environment()

        assert config.environment == Environment.PRODUCTION
        assert config.debug == False
        assert config.port == 8080

    def test_load_round_settings_from_environment(self):
        """Test loading the round settings from environment"""
        env_vars = {
            'FLASK_ENV': 'testing',
            'ROUND_DURATION_SECONDS': '45.5',
            'TIMER_POLL_INTERVAL': '0.25',
            'MIN_PLAYERS_REQUIRED': '3',
            'BROADCAST_ROOM': 'arena'
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = self.factory.load_from_environment()

        assert config.environment == Environment.TESTING
        assert config.round_duration_seconds == 45.5
        assert config.timer_poll_interval == 0.25
        assert config.min_players_required == 3
        assert config.broadcast_room == 'arena'

    def test_load_from_environment_type_conversion(self):
        """Test type conversion of environment variables"""
        env_vars = {
            'PORT': 'not_a_number',
            'ROUND_DURATION_SECONDS': 'soon',
            'DEBUG': 'yes',
            'FLASK_ENV': 'development'
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = self.factory.load_from_environment()

        # Invalid values fall back to defaults
        assert config.port == 5000
        assert config.round_duration_seconds == 60.0
        assert config.debug == True

    def test_load_from_dict(self):
        """Test loading configuration from dictionary"""
        config = self.factory.load_from_dict({
            'secret_key': 'dict-secret',
            'environment': Environment.TESTING,
            'round_duration_seconds': 30
        })

        assert config.secret_key == 'dict-secret'
        assert config.environment == Environment.TESTING
        assert config.round_duration_seconds == 30

    def test_get_config_before_loading(self):
        """Test that getting config before loading raises error"""
        with pytest.raises(ConfigError, match="Configuration not loaded"):
            self.factory.get_config()

    def test_get_flask_config(self):
        """Test getting Flask-compatible configuration"""
        self.factory.load_from_dict({
            'secret_key': 'flask-secret',
            'debug': True,
            'min_players_required': 3
        })

        flask_config = self.factory.get_flask_config()

        assert flask_config['SECRET_KEY'] == 'flask-secret'
        assert flask_config['DEBUG'] == True
        assert flask_config['ROUND_DURATION_SECONDS'] == 60.0
        assert flask_config['TIMER_POLL_INTERVAL'] == 0.5
        assert flask_config['MIN_PLAYERS_REQUIRED'] == 3


class TestGlobalFunctions:
    """Test global configuration functions"""

    def test_load_config_function(self):
        env_vars = {'SECRET_KEY': 'global-secret', 'PORT': '7000'}

        with patch.dict(os.environ, env_vars, clear=True):
            config = load_config()

        assert config.secret_key == 'global-secret'
        assert config.port == 7000

    def test_get_config_function(self):
        load_config_from_dict({'secret_key': 'get-test-secret'})

        assert get_config().secret_key == 'get-test-secret'

    def test_reset_config_function(self):
        load_config_from_dict({'secret_key': 'to-be-reset'})

        reset_config()

        with pytest.raises(ConfigError, match="Configuration not loaded"):
            get_config()


class TestRoundSettings:
    """Test round settings access on top of the configuration"""

    def test_fallback_defaults_without_config(self):
        settings = RoundSettings()

        assert settings.round_duration == 60.0
        assert settings.poll_interval == 0.5
        assert settings.min_players_required == 2
        assert settings.broadcast_room == 'round'

    def test_values_from_explicit_config(self):
        settings = RoundSettings(AppConfig(round_duration_seconds=20, timer_poll_interval=1,
                                           min_players_required=3, broadcast_room='lobby'))

        assert settings.round_duration == 20
        assert settings.poll_interval == 1
        assert settings.min_players_required == 3
        assert settings.broadcast_room == 'lobby'

    def test_global_instance_is_cached_until_reset(self):
        first = get_round_settings()
        assert get_round_settings() is first

        reset_round_settings()

        assert get_round_settings() is not first
