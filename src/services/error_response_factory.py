"""
Error Response Factory for Crime Scene

Provides standardized error and success response creation functionality.
"""

import logging
import traceback
from typing import Dict, Any, Optional, Tuple

from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)

# HTTP status per error code; rule rejections not listed here are reported with 200
STATUS_BY_CODE = {
    ErrorCode.INVALID_DATA: 400,
    ErrorCode.MISSING_DATA: 400,
    ErrorCode.MISSING_ROOM_CODE: 400,
    ErrorCode.INVALID_ROOM_CODE: 400,
    ErrorCode.MISSING_PLAYER_NAME: 400,
    ErrorCode.PLAYER_NAME_TOO_LONG: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.ROOM_NOT_FOUND: 404,
    ErrorCode.INTERNAL_ERROR: 500,
}


class ErrorResponseFactory:
    """Factory responsible for creating standardized error and success responses."""

    def create_success_response(self, data: Optional[Dict] = None) -> Dict:
        """
        Create standardized success response.

        Args:
            data: Response fields merged next to the success flag

        Returns:
            Standardized success response
        """
        response = {"success": True}
        response.update(data or {})
        return response

    def create_error_response(self, code: ErrorCode, message: str, details: Optional[Dict] = None,
                              defaults: Optional[Dict] = None) -> Dict:
        """
        Create standardized error response.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details
            defaults: Fields the endpoint always returns, filled with their failure values

        Returns:
            Standardized error response
        """
        response = {"success": False}
        response.update(defaults or {})
        response["error"] = {
            "code": code.value,
            "message": message,
            "details": details or {}
        }
        return response

    def create_action_response(self, result, defaults: Optional[Dict] = None) -> Tuple[Dict, int]:
        """
        Turn a game manager ActionResult into a response body and HTTP status.

        Args:
            result: ActionResult from the game manager
            defaults: Failure values for the endpoint's fields

        Returns:
            Tuple of (response body, status code)
        """
        if result.success:
            return self.create_success_response(result.data), 200
        body = self.create_error_response(result.error, result.message, result.details, defaults)
        return body, self.status_for(result.error)

    def status_for(self, code: ErrorCode) -> int:
        """HTTP status used to report an error code."""
        return STATUS_BY_CODE.get(code, 200)

    def handle_exception(self, e: Exception, context: str = "Unknown") -> Tuple[ErrorCode, str]:
        """
        Handle unexpected exceptions and return appropriate error code and message.

        Args:
            e: Exception instance
            context: Context where the exception occurred

        Returns:
            Tuple of (error_code, error_message)
        """
        if isinstance(e, ValidationError):
            return e.code, e.message

        logger.error(f"Unexpected exception in {context}: {str(e)}")
        logger.error(f"Exception traceback: {traceback.format_exc()}")

        return ErrorCode.INTERNAL_ERROR, "An internal error occurred"
