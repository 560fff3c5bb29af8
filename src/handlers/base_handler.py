"""
Base Handler Classes

This module provides the base class for Socket.IO handlers with common patterns
for service access, validation, session management and response formatting.
"""

import logging
from typing import Any, Dict, Optional
from flask import request
from flask_socketio import emit, join_room, leave_room

from container import get_container
from src.core.errors import ErrorCode, RoundResult, ValidationError

logger = logging.getLogger(__name__)


class BaseHandler:
    """
    Base class for all Socket.IO handlers.

    Provides service access through the container, session lookup,
    payload validation and standardized response emission.
    """

    @property
    def _container(self):
        return get_container()

    @property
    def round_manager(self):
        """Get the round manager service."""
        return self._container.get('RoundManager')

    @property
    def session_service(self):
        """Get the session service."""
        return self._container.get('SessionService')

    @property
    def broadcast_service(self):
        """Get the broadcast service."""
        return self._container.get('BroadcastService')

    @property
    def error_response_factory(self):
        """Get the error response factory service."""
        return self._container.get('ErrorResponseFactory')

    def get_current_player_id(self) -> Optional[str]:
        """Get the player id the requesting client joined with."""
        return self.session_service.get_player_id(request.sid)  # type: ignore[attr-defined]

    def require_player_id(self) -> str:
        """
        Get the requesting client's player id, raising an error if it has not joined.

        Raises:
            ValidationError: If the client has not joined the round
        """
        player_id = self.get_current_player_id()
        if player_id is None:
            raise ValidationError(
                ErrorCode.NOT_IN_ROUND,
                'You have not joined the round'
            )
        return player_id

    def validate_data_dict(self, data: Any, required_fields: Optional[list] = None) -> Dict[str, Any]:
        """
        Validate that data is a dictionary and contains required fields.

        Raises:
            ValidationError: If data is not a dict or a field is missing
        """
        if not isinstance(data, dict):
            raise ValidationError(ErrorCode.INVALID_DATA, 'Invalid data format - expected object')

        for field in required_fields or []:
            if field not in data:
                raise ValidationError(ErrorCode.INVALID_DATA, f'Missing required field: {field}')

        return data

    def check_result(self, result: RoundResult) -> None:
        """Raise the failure carried by a round operation result."""
        result.raise_for_failure()

    def join_broadcast_room(self) -> None:
        """Join the Socket.IO room that receives round broadcasts."""
        join_room(self.broadcast_service.room)
        logger.debug(f'Client {request.sid} joined Socket.IO room: {self.broadcast_service.room}')  # type: ignore[attr-defined]

    def leave_broadcast_room(self) -> None:
        """Leave the Socket.IO room that receives round broadcasts."""
        leave_room(self.broadcast_service.room)
        logger.debug(f'Client {request.sid} left Socket.IO room: {self.broadcast_service.room}')  # type: ignore[attr-defined]

    def emit_success(self, event_name: str, data: Optional[Dict[str, Any]] = None) -> None:
        """
        Emit a success response to the requesting client.

        Args:
            event_name: The name of the event to emit
            data: Optional data to include in the response
        """
        response = self.error_response_factory.create_success_response(data or {})
        emit(event_name, response)

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        """Log the start of handler execution."""
        logger.info(f'{handler_name} called by client: {request.sid}')  # type: ignore[attr-defined]
        if data:
            logger.debug(f'{handler_name} data: {data}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        """Log successful handler completion."""
        log_msg = f'{handler_name} completed successfully for client: {request.sid}'  # type: ignore[attr-defined]
        if message:
            log_msg += f' - {message}'
        logger.info(log_msg)
