"""
Core error definitions for the round manager

Provides error codes, the validation exception used by socket handlers and the
result type returned by fallible round operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""
    
    # Request Errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_PLAYER_ID = "MISSING_PLAYER_ID"
    NOT_IN_ROUND = "NOT_IN_ROUND"
    ALREADY_JOINED = "ALREADY_JOINED"
    PLAYER_ID_TAKEN = "PLAYER_ID_TAKEN"
    
    # Round Lifecycle Errors
    ROUND_NOT_WAITING = "ROUND_NOT_WAITING"
    TIMER_ACTIVE = "TIMER_ACTIVE"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    ROUND_NOT_RUNNING = "ROUND_NOT_RUNNING"
    ROUND_NOT_FINISHED = "ROUND_NOT_FINISHED"
    
    # State Machine Errors
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_STATE = "INVALID_STATE"
    
    # System Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ValidationError(Exception):
    """Custom exception for validation errors."""
    
    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


@dataclass(frozen=True)
class RoundResult:
    """
    Outcome of a fallible round operation.

    Truthy on success. Unpacks as a ``(success, message)`` pair so callers can
    write ``ok, message = manager.start(players)``.
    """
    success: bool
    message: str = ""
    code: Optional[ErrorCode] = None

    def __post_init__(self):
        if not self.success and self.code is None:
            raise ValueError("A failed RoundResult requires an error code")

    @classmethod
    def ok(cls) -> 'RoundResult':
        return cls(True)

    @classmethod
    def fail(cls, code: ErrorCode, message: str) -> 'RoundResult':
        return cls(False, message, code)

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        yield self.success
        yield self.message

    def raise_for_failure(self) -> None:
        """Raise ValidationError carrying this result's code and message if it failed."""
        if not self.success:
            raise ValidationError(self.code, self.message)
