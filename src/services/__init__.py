"""
Services package for Crime Scene

Contains decomposed service classes that follow Single Responsibility Principle.
"""

from .concurrency_control_service import ConcurrencyControlService
from .room_store import RoomStore, InMemoryRoomStore
from .role_assignment_service import RoleAssignmentService
from .game_rules_service import GameRulesService, AccusationOutcome

__all__ = [
    'ConcurrencyControlService',
    'RoomStore',
    'InMemoryRoomStore',
    'RoleAssignmentService',
    'GameRulesService',
    'AccusationOutcome'
]
