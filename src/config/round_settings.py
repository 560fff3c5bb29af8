"""
Round Settings Configuration Module

Provides centralized access to round-specific configuration values,
replacing hardcoded constants in the round manager.
"""

import logging

from config_factory import ConfigError, get_config

logger = logging.getLogger(__name__)

DEFAULT_ROUND_DURATION = 60.0
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_MIN_PLAYERS = 2
DEFAULT_BROADCAST_ROOM = 'round'


class RoundSettings:
    """Centralized round settings management."""

    def __init__(self, app_config=None):
        """
        Initialize round settings.

        Args:
            app_config: Application configuration instance from config_factory
        """
        self._config = app_config
        if app_config is None:
            try:
                self._config = get_config()
            except ConfigError as e:
                logger.debug(f"Could not load configuration: {e}, using defaults")

    @property
    def round_duration(self) -> float:
        """
        Get the round duration in seconds.

        Returns:
            Seconds a round runs before the countdown ends it
        """
        if self._config is None:
            return DEFAULT_ROUND_DURATION

        return self._config.round_duration_seconds

    @property
    def poll_interval(self) -> float:
        """
        Get the countdown polling interval in seconds.

        Returns:
            Seconds the countdown sleeps between state checks
        """
        if self._config is None:
            return DEFAULT_POLL_INTERVAL

        return self._config.timer_poll_interval

    @property
    def min_players_required(self) -> int:
        """
        Get minimum players required to start a round.

        Returns:
            Minimum number of players required
        """
        if self._config is None:
            return DEFAULT_MIN_PLAYERS

        return self._config.min_players_required

    @property
    def broadcast_room(self) -> str:
        """Socket.IO room that receives round lifecycle broadcasts."""
        if self._config is None:
            return DEFAULT_BROADCAST_ROOM

        return self._config.broadcast_room


# Global instance for easy access
_round_settings_instance = None


def get_round_settings(app_config=None) -> RoundSettings:
    """
    Get or create the global round settings instance.

    Args:
        app_config: Optional app config to use

    Returns:
        RoundSettings instance
    """
    global _round_settings_instance

    if _round_settings_instance is None or app_config is not None:
        _round_settings_instance = RoundSettings(app_config)

    return _round_settings_instance


def reset_round_settings():
    """Reset the global round settings instance (mainly for testing)."""
    global _round_settings_instance
    _round_settings_instance = None
