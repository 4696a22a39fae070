"""
Game State Records

Typed records for a room's game state. The camelCase dictionaries produced by
``to_dict`` are both the persisted form kept in the room store and the shape
returned to polling clients.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from src.core.game_phases import ClueCategory, GamePhase, Role, Winner


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Card:
    """A method or evidence card."""
    id: str
    type: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'type': self.type, 'name': self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Card':
        return cls(id=data['id'], type=data['type'], name=data['name'])


@dataclass(frozen=True)
class ClueCard:
    """A forensic clue card."""
    id: str
    category: ClueCategory
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'category': self.category.value, 'name': self.name}


@dataclass
class Player:
    """A player seated in a room."""
    id: str
    name: str
    role: Optional[Role] = None
    is_host: bool = False
    has_credential: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'role': self.role.value if self.role else None,
            'isHost': self.is_host,
            'hasCredential': self.has_credential
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        return cls(
            id=data['id'],
            name=data['name'],
            role=Role(data['role']) if data.get('role') else None,
            is_host=data.get('isHost', False),
            has_credential=data.get('hasCredential', True)
        )


@dataclass(frozen=True)
class MurdererChoice:
    """The secret method and evidence committed by the murderer."""
    method_id: Optional[str] = None
    evidence_id: Optional[str] = None

    @property
    def is_committed(self) -> bool:
        return self.method_id is not None and self.evidence_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {'methodId': self.method_id, 'evidenceId': self.evidence_id}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'MurdererChoice':
        data = data or {}
        return cls(method_id=data.get('methodId'), evidence_id=data.get('evidenceId'))


@dataclass(frozen=True)
class ClueMarker:
    """A clue disclosed by the forensic player."""
    category: ClueCategory
    card_name: str
    turn_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.value,
            'cardName': self.card_name,
            'turnNumber': self.turn_number
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClueMarker':
        return cls(
            category=ClueCategory(data['category']),
            card_name=data['cardName'],
            turn_number=data['turnNumber']
        )


@dataclass(frozen=True)
class Guess:
    """An accusation attempt, with display names captured when it was made."""
    player_id: str
    player_name: str
    suspect_id: str
    suspect_name: str
    method_card: str
    evidence_card: str
    timestamp: int
    correct: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'playerId': self.player_id,
            'playerName': self.player_name,
            'suspectId': self.suspect_id,
            'suspectName': self.suspect_name,
            'methodCard': self.method_card,
            'evidenceCard': self.evidence_card,
            'timestamp': self.timestamp,
            'correct': self.correct
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Guess':
        return cls(
            player_id=data['playerId'],
            player_name=data['playerName'],
            suspect_id=data['suspectId'],
            suspect_name=data['suspectName'],
            method_card=data['methodCard'],
            evidence_card=data['evidenceCard'],
            timestamp=data['timestamp'],
            correct=data['correct']
        )


@dataclass
class GameState:
    """Aggregate root for one room; the unit of persistence."""
    room_code: str
    phase: GamePhase = GamePhase.LOBBY
    players: List[Player] = field(default_factory=list)
    table_methods: List[Card] = field(default_factory=list)
    table_evidences: List[Card] = field(default_factory=list)
    murderer_choice: MurdererChoice = field(default_factory=MurdererChoice)
    current_turn: int = 0
    clues_this_turn: int = 0
    clues_required: int = 0
    forensic_clues: List[ClueMarker] = field(default_factory=list)
    guesses: List[Guess] = field(default_factory=list)
    winner: Optional[Winner] = None
    created_at: int = field(default_factory=now_ms)
    version: int = 0

    def find_player(self, player_id: Optional[str]) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_table_method(self, method_id: Optional[str]) -> Optional[Card]:
        return next((card for card in self.table_methods if card.id == method_id), None)

    def find_table_evidence(self, evidence_id: Optional[str]) -> Optional[Card]:
        return next((card for card in self.table_evidences if card.id == evidence_id), None)

    @property
    def host(self) -> Optional[Player]:
        return next((p for p in self.players if p.is_host), None)

    def copy(self) -> 'GameState':
        """Copy with fresh containers so a transition never touches the original."""
        return replace(
            self,
            players=[replace(p) for p in self.players],
            table_methods=list(self.table_methods),
            table_evidences=list(self.table_evidences),
            forensic_clues=list(self.forensic_clues),
            guesses=list(self.guesses)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'roomCode': self.room_code,
            'phase': self.phase.value,
            'players': [p.to_dict() for p in self.players],
            'tableMethods': [c.to_dict() for c in self.table_methods],
            'tableEvidences': [c.to_dict() for c in self.table_evidences],
            'murdererChoice': self.murderer_choice.to_dict(),
            'currentTurn': self.current_turn,
            'cluesThisTurn': self.clues_this_turn,
            'cluesRequired': self.clues_required,
            'forensicClues': [c.to_dict() for c in self.forensic_clues],
            'guesses': [g.to_dict() for g in self.guesses],
            'winner': self.winner.value if self.winner else None,
            'createdAt': self.created_at,
            'version': self.version
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameState':
        return cls(
            room_code=data['roomCode'],
            phase=GamePhase(data['phase']),
            players=[Player.from_dict(p) for p in data.get('players', [])],
            table_methods=[Card.from_dict(c) for c in data.get('tableMethods', [])],
            table_evidences=[Card.from_dict(c) for c in data.get('tableEvidences', [])],
            murderer_choice=MurdererChoice.from_dict(data.get('murdererChoice')),
            current_turn=data.get('currentTurn', 0),
            clues_this_turn=data.get('cluesThisTurn', 0),
            clues_required=data.get('cluesRequired', 0),
            forensic_clues=[ClueMarker.from_dict(c) for c in data.get('forensicClues', [])],
            guesses=[Guess.from_dict(g) for g in data.get('guesses', [])],
            winner=Winner(data['winner']) if data.get('winner') else None,
            created_at=data.get('createdAt', 0),
            version=data.get('version', 0)
        )
