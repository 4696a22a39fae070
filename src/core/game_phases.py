"""
Game Enumerations

Defines the game phases, player roles, winners and clue categories used
throughout the application.
"""

from enum import Enum


class GamePhase(Enum):
    """Game phase enumeration."""
    LOBBY = "lobby"
    MURDERER_SELECTION = "murderer_selection"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class Role(Enum):
    """Secret role dealt to each player at game start."""
    FORENSIC = "forensic"
    MURDERER = "murderer"
    ACCOMPLICE = "accomplice"
    INVESTIGATOR = "investigator"


class Winner(Enum):
    """Team that won a finished game."""
    INVESTIGATORS = "investigators"
    MURDERER = "murderer"


class ClueCategory(Enum):
    """Categories the forensic clue cards are grouped by."""
    LOCATION = "location"
    TIME = "time"
    WEATHER = "weather"
    CONDITION = "condition"
    RELATIONSHIP = "relationship"
    OTHER = "other"


# Roles whose remaining credentials keep the game alive
CREDENTIAL_TRACKED_ROLES = (Role.INVESTIGATOR, Role.ACCOMPLICE)
