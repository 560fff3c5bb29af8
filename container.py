"""
Service Container for the round server

Creates each round service once, resolving its constructor arguments from
other registered services or from external objects such as the SocketIO instance.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class CircularDependencyError(Exception):
    """Raised when services depend on each other in a loop"""
    pass


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


class ServiceContainer:
    """Lazily built singletons with explicit, positional dependencies."""

    def __init__(self):
        self._factories: Dict[str, Tuple[Callable, List[str]]] = {}
        self._instances: Dict[str, Any] = {}
        self._resolving: List[str] = []

    def register(self, name: str, factory: Callable,
                 dependencies: Optional[List[str]] = None) -> 'ServiceContainer':
        """
        Register a service factory.

        Args:
            name: Service name for retrieval
            factory: Class or function called with the resolved dependencies
            dependencies: Names of services passed to the factory, in order
        """
        if name in self._factories:
            raise ValueError(f"Service '{name}' is already registered")
        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._factories[name] = (factory, list(dependencies or []))
        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """Provide an object built outside the container (e.g. Flask-SocketIO)."""
        self._instances[name] = instance
        return self

    def get(self, name: str) -> Any:
        """
        Get a service instance, creating it and its dependencies on first use.

        Raises:
            ServiceNotFoundError: If service is not registered
            CircularDependencyError: If the service depends on itself
        """
        if name in self._instances:
            return self._instances[name]

        if name not in self._factories:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")

        if name in self._resolving:
            cycle = ' -> '.join(self._resolving + [name])
            raise CircularDependencyError(f"Circular dependency detected: {cycle}")

        factory, dependencies = self._factories[name]
        self._resolving.append(name)
        try:
            instance = factory(*[self.get(dependency) for dependency in dependencies])
        finally:
            self._resolving.pop()

        self._instances[name] = instance
        logger.debug(f"Created service {name}")
        return instance

    def has_service(self, name: str) -> bool:
        """Check if a service is registered or provided externally"""
        return name in self._factories or name in self._instances

    def clear(self) -> 'ServiceContainer':
        """Forget all registrations and instances"""
        self._factories.clear()
        self._instances.clear()
        self._resolving.clear()
        return self


# Global container instance for the application
_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global application service container"""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def reset_container() -> None:
    """Drop the global container, stopping the countdown of any round manager it created"""
    global _app_container
    if _app_container is not None:
        round_manager = _app_container._instances.get('RoundManager')
        if round_manager is not None:
            round_manager.shutdown()
    _app_container = None


def configure_container(socketio=None) -> ServiceContainer:
    """
    Register the round services on the global container.

    Args:
        socketio: Flask-SocketIO instance the broadcast service emits through

    Returns:
        Configured service container
    """
    from src.round_manager import RoundManager
    from src.services.broadcast_service import BroadcastService
    from src.services.error_response_factory import ErrorResponseFactory
    from src.services.session_service import SessionService

    container = get_container()
    container.clear()

    if socketio is not None:
        container.set_external_dependency('socketio', socketio)

    container.register('ErrorResponseFactory', ErrorResponseFactory)
    container.register('SessionService', SessionService)
    container.register('RoundManager', RoundManager)
    container.register('BroadcastService', BroadcastService, dependencies=['socketio', 'RoundManager'])

    return container
