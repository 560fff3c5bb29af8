"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import pytest
import os

# Ensure testing environment
os.environ['TESTING'] = '1'
os.environ.setdefault('FLASK_ENV', 'testing')


@pytest.fixture(scope="function", autouse=True)
def reset_global_state():
    """Reset configuration, round settings and the container around each test."""
    from container import reset_container
    from config_factory import reset_config
    from src.config.round_settings import reset_round_settings

    reset_container()
    reset_config()
    reset_round_settings()

    yield

    reset_container()
    reset_config()
    reset_round_settings()


@pytest.fixture(scope="function")
def scheduled_tasks():
    """Capture countdown tasks instead of spawning green threads."""
    return []


@pytest.fixture(scope="function")
def fake_clock():
    """Manually advanced monotonic clock."""
    return FakeClock()


@pytest.fixture(scope="function")
def round_manager(scheduled_tasks, fake_clock):
    """RoundManager whose countdown is captured and driven by a fake clock."""
    from src.round_manager import RoundManager

    return RoundManager(
        round_duration=60,
        poll_interval=0.5,
        min_players=2,
        spawn=lambda func, *args: scheduled_tasks.append((func, args)),
        sleep=fake_clock.advance,
        clock=fake_clock
    )


@pytest.fixture(scope="function")
def container():
    """Create service container with a mock SocketIO instance."""
    from container import configure_container
    from config_factory import Environment, load_config_from_dict
    from tests.helpers.socket_mocks import create_mock_socketio

    load_config_from_dict({'environment': Environment.TESTING})
    return configure_container(socketio=create_mock_socketio())


class FakeClock:
    """Callable clock whose time only moves when advanced."""

    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
