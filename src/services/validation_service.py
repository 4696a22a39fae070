"""
Validation Service for Crime Scene

Provides request input validation and sanitization, separated from error response handling.
Game-rule checks (roles, phases, table cards) live in the rules service, not here.
"""

import logging
import re
from typing import Dict, Any, Optional

from src.core.errors import ErrorCode, ValidationError
from src.room_manager import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH

logger = logging.getLogger(__name__)


class ValidationService:
    """Service responsible for input validation and sanitization."""

    # Validation constants
    MAX_FIELD_LENGTH = 100

    ROOM_CODE_PATTERN = re.compile(rf'^[{ROOM_CODE_ALPHABET}]{{{ROOM_CODE_LENGTH}}}$')
    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x1F\x7F]')

    # Payload field -> error code used when that single field is missing
    FIELD_ERROR_CODES = {
        'roomCode': (ErrorCode.MISSING_ROOM_CODE, "Room code is required"),
        'hostName': (ErrorCode.MISSING_PLAYER_NAME, "Host name is required"),
        'playerName': (ErrorCode.MISSING_PLAYER_NAME, "Player name is required"),
    }

    def __init__(self, game_settings=None):
        """Initialize ValidationService with configuration"""
        self._game_settings = game_settings

    def get_max_player_name_length(self) -> int:
        """Get maximum player name length from configuration"""
        if self._game_settings is not None:
            return self._game_settings.max_player_name_length
        try:
            from config_factory import get_config
            return get_config().max_player_name_length
        except Exception:
            return 20

    def validate_request_data(self, data: Any, required_fields: Optional[list] = None) -> Dict:
        """
        Validate a JSON request body.

        Args:
            data: Parsed request body
            required_fields: List of required field names

        Returns:
            Validated data dictionary

        Raises:
            ValidationError: If data is invalid
        """
        if not isinstance(data, dict):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                "Invalid data format - expected JSON object"
            )

        if required_fields:
            missing_fields = [field for field in required_fields if data.get(field) in (None, '')]
            if missing_fields:
                if len(missing_fields) == 1 and missing_fields[0] in self.FIELD_ERROR_CODES:
                    code, message = self.FIELD_ERROR_CODES[missing_fields[0]]
                    raise ValidationError(code, message)

                raise ValidationError(
                    ErrorCode.MISSING_DATA,
                    f"Missing required fields: {', '.join(missing_fields)}",
                    {"missing_fields": missing_fields, "required_fields": required_fields}
                )

        return data

    def validate_room_code(self, room_code: Any) -> str:
        """
        Validate and normalize a room code.

        Args:
            room_code: Raw room code

        Returns:
            Upper-cased room code

        Raises:
            ValidationError: If room code is invalid
        """
        if not room_code or not isinstance(room_code, str):
            raise ValidationError(
                ErrorCode.MISSING_ROOM_CODE,
                "Room code is required"
            )

        room_code = room_code.strip().upper()

        if not self.ROOM_CODE_PATTERN.match(room_code):
            raise ValidationError(
                ErrorCode.INVALID_ROOM_CODE,
                f"Room code must be {ROOM_CODE_LENGTH} characters from {ROOM_CODE_ALPHABET}",
                {"room_code": room_code}
            )

        return room_code

    def validate_player_name(self, player_name: Any) -> str:
        """
        Validate and sanitize player name.

        Args:
            player_name: Raw player name string

        Returns:
            Sanitized player name

        Raises:
            ValidationError: If player name is invalid
        """
        if not player_name or not isinstance(player_name, str):
            raise ValidationError(
                ErrorCode.MISSING_PLAYER_NAME,
                "Player name is required"
            )

        player_name = self.CONTROL_CHARS_PATTERN.sub('', player_name)
        player_name = re.sub(r'\s+', ' ', player_name).strip()

        if not player_name:
            raise ValidationError(
                ErrorCode.MISSING_PLAYER_NAME,
                "Player name cannot be empty"
            )

        max_length = self.get_max_player_name_length()
        if len(player_name) > max_length:
            raise ValidationError(
                ErrorCode.PLAYER_NAME_TOO_LONG,
                f"Player name must be {max_length} characters or less",
                {"max_length": max_length, "actual_length": len(player_name)}
            )

        return player_name

    def validate_text_field(self, value: Any, field_name: str) -> str:
        """
        Validate an identifier-like string field (player ids, card ids, clue names).

        Raises:
            ValidationError: If the value is not a short non-empty string
        """
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f"{field_name} must be a non-empty string",
                {"field": field_name}
            )

        value = value.strip()
        if len(value) > self.MAX_FIELD_LENGTH or self.CONTROL_CHARS_PATTERN.search(value):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f"{field_name} is not a valid value",
                {"field": field_name}
            )

        return value
