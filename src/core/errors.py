"""
Core error definitions for Crime Scene

Provides error codes and exceptions that don't depend on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Request Data Errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_DATA = "MISSING_DATA"
    MISSING_ROOM_CODE = "MISSING_ROOM_CODE"
    INVALID_ROOM_CODE = "INVALID_ROOM_CODE"
    MISSING_PLAYER_NAME = "MISSING_PLAYER_NAME"
    PLAYER_NAME_TOO_LONG = "PLAYER_NAME_TOO_LONG"
    PLAYER_NAME_TAKEN = "PLAYER_NAME_TAKEN"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Room Management Errors
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    INSUFFICIENT_PLAYERS = "INSUFFICIENT_PLAYERS"
    TOO_MANY_PLAYERS = "TOO_MANY_PLAYERS"

    # Game Rule Errors
    WRONG_PHASE = "WRONG_PHASE"
    NOT_ALLOWED = "NOT_ALLOWED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

    # System Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ValidationError(Exception):
    """Custom exception for validation errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class GameRuleError(ValidationError):
    """Raised by the room state machine when an operation is rejected.

    The room state is never modified when this is raised.
    """
    pass
