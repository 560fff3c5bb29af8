"""
Error handling for Socket.IO round handlers.
"""

from functools import wraps

from container import get_container
from src.core.errors import ValidationError


def with_error_handling(func):
    """
    Report anything a handler raises to the calling client as an ``error`` event.

    The handler returns None in that case; exceptions never reach Flask-SocketIO.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            get_container().get('ErrorResponseFactory').emit_validation_error(e)
        except Exception as e:
            factory = get_container().get('ErrorResponseFactory')
            error_code, error_message = factory.handle_exception(e, func.__name__)
            factory.emit_error(error_code, error_message)

    return wrapper
