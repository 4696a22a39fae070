"""
Game Manager for Crime Scene

Runs each game operation as one read-modify-write cycle against a room:
load the state, apply a single rules transition, persist the result.
Works with RoomManager for storage and GameRulesService for the rules.
"""

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, GameRuleError
from src.core.game_state import GameState
from src.room_manager import RoomManager
from src.services.game_rules_service import GameRulesService
from src.services.role_assignment_service import RoleAssignmentService

logger = logging.getLogger(__name__)

Transition = Callable[[GameState], Tuple[GameState, Dict[str, Any]]]


@dataclass
class ActionResult:
    """Outcome of a game operation; error is set only when success is False."""
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ErrorCode] = None
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Optional[Dict[str, Any]] = None) -> 'ActionResult':
        return cls(success=True, data=data or {})

    @classmethod
    def failure(cls, error: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> 'ActionResult':
        return cls(success=False, error=error, message=message, details=details or {})


class GameManager:
    """Manages game state transitions for all rooms."""

    def __init__(self, room_manager: RoomManager, card_catalog, game_settings=None,
                 rng: Optional[random.Random] = None):
        self.room_manager = room_manager
        self.card_catalog = card_catalog
        self.game_settings = game_settings or get_game_settings()
        self.role_assignment = RoleAssignmentService(self.game_settings, rng)
        self.rules = GameRulesService(card_catalog, self.role_assignment, self.game_settings)

    def _apply(self, room_code: str, operation: str, transition: Transition) -> ActionResult:
        """Apply one transition to a room under its lock; nothing is written on failure."""
        with self.room_manager.room_operation(room_code):
            state = self.room_manager.get_room_state(room_code)
            if state is None:
                logger.warning(f"{operation} rejected: room {room_code} not found")
                return ActionResult.failure(ErrorCode.ROOM_NOT_FOUND, f"Room {room_code} not found")

            try:
                new_state, data = transition(state)
                self.room_manager.save_room_state(new_state, state.version)
            except GameRuleError as e:
                logger.warning(f"{operation} rejected in room {room_code}: {e.code.value} - {e.message}")
                return ActionResult.failure(e.code, e.message, e.details)

        logger.info(f"{operation} applied in room {room_code} (phase {new_state.phase.value})")
        return ActionResult.ok(data)

    def create_room(self, host_name: str) -> ActionResult:
        """
        Create a room with the caller seated as host.

        Returns:
            ActionResult with roomCode and playerId
        """
        host_id = str(uuid.uuid4())
        state = self.room_manager.create_room(
            lambda room_code: self.rules.create_initial_state(room_code, host_name, host_id)
        )
        logger.info(f"Host {host_name} opened room {state.room_code}")
        return ActionResult.ok({'roomCode': state.room_code, 'playerId': host_id})

    def join_room(self, room_code: str, player_name: str) -> ActionResult:
        """
        Seat a player in a lobby.

        Returns:
            ActionResult with playerId
        """
        player_id = str(uuid.uuid4())
        return self._apply(
            room_code, 'join',
            lambda state: (self.rules.join(state, player_name, player_id), {'playerId': player_id})
        )

    def get_state(self, room_code: str) -> Optional[GameState]:
        """Get the current game state, or None if the room doesn't exist."""
        return self.room_manager.get_room_state(room_code)

    def start_game(self, room_code: str) -> ActionResult:
        return self._apply(room_code, 'start', lambda state: (self.rules.start(state), {}))

    def choose_murderer_cards(self, room_code: str, player_id: str,
                              method_id: str, evidence_id: str) -> ActionResult:
        return self._apply(
            room_code, 'choose_murderer_cards',
            lambda state: (self.rules.choose_murderer_cards(state, player_id, method_id, evidence_id), {})
        )

    def add_clue(self, room_code: str, player_id: str, category: str, card_name: str) -> ActionResult:
        return self._apply(
            room_code, 'add_clue',
            lambda state: (self.rules.add_clue(state, player_id, category, card_name), {})
        )

    def finish_turn(self, room_code: str, player_id: str) -> ActionResult:
        return self._apply(
            room_code, 'finish_turn',
            lambda state: (self.rules.finish_turn(state, player_id), {})
        )

    def accuse(self, room_code: str, player_id: str, suspect_id: str,
               method_id: str, evidence_id: str) -> ActionResult:
        """
        Resolve an accusation.

        Returns:
            ActionResult with correct, gameOver and winner
        """
        def transition(state: GameState):
            new_state, outcome = self.rules.accuse(state, player_id, suspect_id, method_id, evidence_id)
            return new_state, outcome.to_dict()

        result = self._apply(room_code, 'accuse', transition)
        if result.success and result.data['gameOver']:
            logger.info(f"Game over in room {room_code}: {result.data['winner']} win")
        return result

    def restart_game(self, room_code: str, host_id: str) -> ActionResult:
        return self._apply(
            room_code, 'restart',
            lambda state: (self.rules.restart(state, host_id), {})
        )

    def close_room(self, room_code: str, host_id: str) -> ActionResult:
        """Delete a room on the host's request."""
        with self.room_manager.room_operation(room_code):
            state = self.room_manager.get_room_state(room_code)
            if state is None:
                return ActionResult.failure(ErrorCode.ROOM_NOT_FOUND, f"Room {room_code} not found")

            try:
                self.rules.authorize_close(state, host_id)
            except GameRuleError as e:
                logger.warning(f"close rejected in room {room_code}: {e.code.value} - {e.message}")
                return ActionResult.failure(e.code, e.message, e.details)

            self.room_manager.delete_room(room_code)

        return ActionResult.ok()
