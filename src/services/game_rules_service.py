"""
Game Rules Service for Crime Scene

The room state machine. Every operation takes the current GameState plus the
caller's input and returns a new GameState; the input state is never mutated.
A rejected operation raises GameRuleError and produces no new state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, GameRuleError
from src.core.game_phases import (
    CREDENTIAL_TRACKED_ROLES, ClueCategory, GamePhase, Role, Winner
)
from src.core.game_state import (
    ClueMarker, GameState, Guess, MurdererChoice, Player, now_ms
)

logger = logging.getLogger(__name__)

# Phases in which each operation is accepted. Close is accepted in any phase.
ALLOWED_PHASES = {
    'join': (GamePhase.LOBBY,),
    'start': (GamePhase.LOBBY,),
    'choose_murderer_cards': (GamePhase.MURDERER_SELECTION,),
    'add_clue': (GamePhase.PLAYING,),
    'finish_turn': (GamePhase.PLAYING,),
    'accuse': (GamePhase.PLAYING,),
    'restart': (GamePhase.GAME_OVER,),
    'close': tuple(GamePhase),
}


@dataclass(frozen=True)
class AccusationOutcome:
    """Result of a resolved accusation."""
    correct: bool
    game_over: bool
    winner: Optional[Winner] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'correct': self.correct,
            'gameOver': self.game_over,
            'winner': self.winner.value if self.winner else None
        }


class GameRulesService:
    """Pure phase/turn/accusation transitions over GameState."""

    def __init__(self, card_catalog, role_assignment_service, game_settings=None):
        self.card_catalog = card_catalog
        self.role_assignment = role_assignment_service
        self.game_settings = game_settings or get_game_settings()

    # Guards

    def _require_phase(self, state: GameState, operation: str) -> None:
        allowed = ALLOWED_PHASES[operation]
        if state.phase not in allowed:
            raise GameRuleError(
                ErrorCode.WRONG_PHASE,
                f"Cannot {operation.replace('_', ' ')} during the {state.phase.value} phase",
                {"phase": state.phase.value, "allowed": [p.value for p in allowed]}
            )

    def _require_player(self, state: GameState, player_id: Optional[str], label: str = "Player") -> Player:
        player = state.find_player(player_id)
        if player is None:
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                f"{label} is not in this room",
                {"player_id": player_id}
            )
        return player

    def _require_role(self, state: GameState, player_id: Optional[str], role: Role) -> Player:
        player = state.find_player(player_id)
        if player is None or player.role != role:
            raise GameRuleError(
                ErrorCode.NOT_ALLOWED,
                f"Only the {role.value} can do that"
            )
        return player

    def _require_host(self, state: GameState, player_id: Optional[str]) -> Player:
        player = state.find_player(player_id)
        if player is None or not player.is_host:
            raise GameRuleError(ErrorCode.NOT_ALLOWED, "Only the host can do that")
        return player

    # Transitions

    def create_initial_state(self, room_code: str, host_name: str, host_id: str) -> GameState:
        """Build the lobby state for a new room with its host seated."""
        host = Player(id=host_id, name=host_name, is_host=True)
        return GameState(room_code=room_code, players=[host])

    def join(self, state: GameState, player_name: str, player_id: str) -> GameState:
        """Seat a new non-host player in the lobby."""
        self._require_phase(state, 'join')

        if len(state.players) >= self.game_settings.max_players_per_room:
            raise GameRuleError(
                ErrorCode.ROOM_FULL,
                f"Room {state.room_code} is full",
                {"max_players": self.game_settings.max_players_per_room}
            )

        if any(p.name == player_name for p in state.players):
            raise GameRuleError(
                ErrorCode.PLAYER_NAME_TAKEN,
                f"Player name '{player_name}' is already taken in room {state.room_code}"
            )

        new_state = state.copy()
        new_state.players.append(Player(id=player_id, name=player_name))
        return new_state

    def start(self, state: GameState) -> GameState:
        """Deal roles and table cards and move to murderer selection."""
        self._require_phase(state, 'start')

        player_count = len(state.players)
        if player_count < self.game_settings.min_players_required:
            raise GameRuleError(
                ErrorCode.INSUFFICIENT_PLAYERS,
                f"At least {self.game_settings.min_players_required} players are needed to start",
                {"player_count": player_count}
            )
        if player_count > self.game_settings.max_players_per_room:
            raise GameRuleError(
                ErrorCode.TOO_MANY_PLAYERS,
                f"At most {self.game_settings.max_players_per_room} players can play",
                {"player_count": player_count}
            )

        methods = self.card_catalog.get_methods()
        evidences = self.card_catalog.get_evidences()
        table_size = self.game_settings.table_cards_per_type
        if len(methods) < table_size or len(evidences) < table_size:
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                f"Card catalog has too few cards to deal {table_size} of each type"
            )

        new_state = state.copy()
        new_state.players = self.role_assignment.assign_roles(state.players)
        new_state.table_methods, new_state.table_evidences = self.role_assignment.deal_table(methods, evidences)
        new_state.phase = GamePhase.MURDERER_SELECTION
        return new_state

    def choose_murderer_cards(self, state: GameState, player_id: str,
                              method_id: str, evidence_id: str) -> GameState:
        """Commit the murderer's secret method and evidence and begin turn 1."""
        self._require_phase(state, 'choose_murderer_cards')
        self._require_role(state, player_id, Role.MURDERER)

        if state.find_table_method(method_id) is None or state.find_table_evidence(evidence_id) is None:
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                "Chosen cards must be on the table",
                {"method_id": method_id, "evidence_id": evidence_id}
            )

        new_state = state.copy()
        new_state.murderer_choice = MurdererChoice(method_id=method_id, evidence_id=evidence_id)
        new_state.phase = GamePhase.PLAYING
        new_state.current_turn = 1
        new_state.clues_this_turn = 0
        new_state.clues_required = self.game_settings.clues_required_for_turn(1)
        return new_state

    def add_clue(self, state: GameState, player_id: str,
                 category: Union[ClueCategory, str], card_name: str) -> GameState:
        """Log a forensic clue against the current turn's budget."""
        self._require_phase(state, 'add_clue')
        self._require_role(state, player_id, Role.FORENSIC)

        try:
            category = ClueCategory(category)
        except ValueError:
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                f"Unknown clue category '{category}'"
            ) from None

        if state.clues_this_turn >= state.clues_required:
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                "All clues for this turn have already been given",
                {"clues_this_turn": state.clues_this_turn, "clues_required": state.clues_required}
            )

        if not self.card_catalog.has_clue(category, card_name):
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                f"No {category.value} clue named '{card_name}'"
            )

        # Turn 1 needs its two clues from different categories
        if state.current_turn == 1 and state.clues_this_turn == 1 and state.forensic_clues:
            if state.forensic_clues[-1].category == category:
                raise GameRuleError(
                    ErrorCode.VALIDATION_FAILED,
                    "The second clue of the first turn must use a different category",
                    {"category": category.value}
                )

        new_state = state.copy()
        new_state.forensic_clues.append(
            ClueMarker(category=category, card_name=card_name, turn_number=state.current_turn)
        )
        new_state.clues_this_turn += 1
        return new_state

    def finish_turn(self, state: GameState, player_id: str) -> GameState:
        """End the forensic player's turn once the clue budget is met."""
        self._require_phase(state, 'finish_turn')
        self._require_role(state, player_id, Role.FORENSIC)

        if state.clues_this_turn < state.clues_required:
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                f"{state.clues_required - state.clues_this_turn} more clue(s) needed before ending the turn",
                {"clues_this_turn": state.clues_this_turn, "clues_required": state.clues_required}
            )

        new_state = state.copy()
        new_state.current_turn += 1
        new_state.clues_this_turn = 0
        new_state.clues_required = self.game_settings.clues_required_for_turn(new_state.current_turn)
        return new_state

    def accuse(self, state: GameState, player_id: str, suspect_id: str,
               method_id: str, evidence_id: str) -> Tuple[GameState, AccusationOutcome]:
        """
        Resolve an accusation.

        Correct only when the suspect is the murderer and both cards match the
        committed choice. A wrong accusation burns the accuser's credential; the
        murderer wins once no investigator or accomplice holds one.
        """
        self._require_phase(state, 'accuse')
        accuser = self._require_player(state, player_id, "Accuser")
        suspect = self._require_player(state, suspect_id, "Suspect")

        if not accuser.has_credential:
            raise GameRuleError(ErrorCode.NOT_ALLOWED, "You have already used your credential")
        if accuser.role == Role.FORENSIC:
            raise GameRuleError(ErrorCode.NOT_ALLOWED, "The forensic expert cannot accuse")

        method_card = state.find_table_method(method_id)
        evidence_card = state.find_table_evidence(evidence_id)
        if method_card is None or evidence_card is None:
            raise GameRuleError(
                ErrorCode.VALIDATION_FAILED,
                "Accused cards must be on the table",
                {"method_id": method_id, "evidence_id": evidence_id}
            )

        correct = (
            suspect.role == Role.MURDERER
            and state.murderer_choice.method_id == method_id
            and state.murderer_choice.evidence_id == evidence_id
        )

        new_state = state.copy()
        new_state.guesses.append(Guess(
            player_id=accuser.id,
            player_name=accuser.name,
            suspect_id=suspect.id,
            suspect_name=suspect.name,
            method_card=method_card.name,
            evidence_card=evidence_card.name,
            timestamp=now_ms(),
            correct=correct
        ))

        if correct:
            new_state.phase = GamePhase.GAME_OVER
            new_state.winner = Winner.INVESTIGATORS
            return new_state, AccusationOutcome(correct=True, game_over=True, winner=Winner.INVESTIGATORS)

        new_state.find_player(accuser.id).has_credential = False

        remaining = [
            p for p in new_state.players
            if p.role in CREDENTIAL_TRACKED_ROLES and p.has_credential
        ]
        if not remaining:
            new_state.phase = GamePhase.GAME_OVER
            new_state.winner = Winner.MURDERER
            return new_state, AccusationOutcome(correct=False, game_over=True, winner=Winner.MURDERER)

        return new_state, AccusationOutcome(correct=False, game_over=False)

    def restart(self, state: GameState, host_id: str) -> GameState:
        """Return a finished game to the lobby keeping the seated players."""
        self._require_phase(state, 'restart')
        self._require_host(state, host_id)

        return GameState(
            room_code=state.room_code,
            players=[
                Player(id=p.id, name=p.name, is_host=p.is_host)
                for p in state.players
            ],
            created_at=state.created_at,
            version=state.version
        )

    def authorize_close(self, state: GameState, host_id: str) -> None:
        """Check that the caller may close the room; closing itself is a store delete."""
        self._require_phase(state, 'close')
        self._require_host(state, host_id)
