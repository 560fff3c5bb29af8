"""
Services package for the round service

Contains the service classes wired around the RoundManager.
"""

from .broadcast_service import BroadcastService
from .error_response_factory import ErrorResponseFactory
from .session_service import SessionService

__all__ = [
    'BroadcastService',
    'ErrorResponseFactory',
    'SessionService'
]
