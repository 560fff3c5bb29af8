"""
Error Response Factory for the round service

Builds the success and error payloads sent back to Socket.IO clients.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from flask_socketio import emit

from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class ErrorResponseFactory:
    """Formats handler replies as ``{"success": ..., "data"|"error": ...}`` payloads."""

    def create_success_response(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"success": True, "data": data}

    def create_error_response(self, code: ErrorCode, message: str,
                              details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": code.value,
                "message": message,
                "details": details or {}
            }
        }

    def emit_error(self, code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None):
        """Send an ``error`` event to the client whose request is being handled."""
        logger.warning(f"Emitting error: {code.value} - {message}")
        emit('error', self.create_error_response(code, message, details))

    def emit_validation_error(self, error: ValidationError):
        self.emit_error(error.code, error.message, error.details)

    def handle_exception(self, e: Exception, context: str) -> Tuple[ErrorCode, str]:
        """
        Map an exception raised inside a handler to the code and message shown to clients.

        Validation failures keep their own code; anything else is logged with its
        traceback and reported as a generic internal error.
        """
        if isinstance(e, ValidationError):
            return e.code, e.message

        logger.exception(f"Unexpected exception in {context}: {e}")
        return ErrorCode.INTERNAL_ERROR, "An internal error occurred"
