"""
Game Settings Configuration Module

Provides centralized access to game-rule configuration values,
replacing hardcoded constants throughout the codebase.
"""

import logging

logger = logging.getLogger(__name__)

# Clue budget per turn
FIRST_TURN_CLUES_REQUIRED = 2
LATER_TURN_CLUES_REQUIRED = 1

# Player count from which an accomplice is dealt
ACCOMPLICE_MIN_PLAYERS = 5


class GameSettings:
    """Centralized game settings management."""

    def __init__(self, app_config=None):
        """
        Initialize game settings.

        Args:
            app_config: Application configuration instance from config_factory
        """
        self._config = app_config
        if app_config is None:
            try:
                from config_factory import get_config
                self._config = get_config()
            except (ImportError, Exception) as e:
                logger.warning(f"Could not load configuration: {e}, using defaults")
                self._config = None

    @property
    def min_players_required(self) -> int:
        """Minimum seated players needed to start a game."""
        if self._config is None:
            return 4  # Fallback default

        return self._config.min_players_required

    @property
    def max_players_per_room(self) -> int:
        """Maximum number of players allowed per room."""
        if self._config is None:
            return 12  # Fallback default

        return self._config.max_players_per_room

    @property
    def table_cards_per_type(self) -> int:
        """Method cards (and evidence cards) dealt face up at game start."""
        if self._config is None:
            return 4

        return self._config.table_cards_per_type

    @property
    def max_player_name_length(self) -> int:
        if self._config is None:
            return 20

        return self._config.max_player_name_length

    @property
    def room_code_attempts(self) -> int:
        if self._config is None:
            return 20

        return self._config.room_code_attempts

    def clues_required_for_turn(self, turn_number: int) -> int:
        """
        Get the clue budget for a turn.

        Args:
            turn_number: 1-based turn number

        Returns:
            Number of clues the forensic player must give before ending the turn
        """
        if turn_number == 1:
            return FIRST_TURN_CLUES_REQUIRED
        return LATER_TURN_CLUES_REQUIRED


# Global instance for easy access
_game_settings_instance = None


def get_game_settings(app_config=None) -> GameSettings:
    """
    Get or create the global game settings instance.

    Args:
        app_config: Optional app config to use

    Returns:
        GameSettings instance
    """
    global _game_settings_instance

    if _game_settings_instance is None or app_config is not None:
        _game_settings_instance = GameSettings(app_config)

    return _game_settings_instance


def reset_game_settings():
    """Reset the global game settings instance (mainly for testing)."""
    global _game_settings_instance
    _game_settings_instance = None
