"""
Role Assignment Service for Crime Scene

Deals secret roles to the seated players and the public table cards at game start.
"""

import logging
import random
from dataclasses import replace
from typing import List, Optional, Tuple

from src.config.game_settings import get_game_settings, ACCOMPLICE_MIN_PLAYERS
from src.core.game_phases import Role
from src.core.game_state import Card, Player

logger = logging.getLogger(__name__)


class RoleAssignmentService:
    """Shuffles roles and table cards using an injectable random source."""

    def __init__(self, game_settings=None, rng: Optional[random.Random] = None):
        self.game_settings = game_settings or get_game_settings()
        self._rng = rng or random.Random()

    def build_role_sequence(self, player_count: int) -> List[Role]:
        """
        Build the positional role list for a table of the given size.

        Args:
            player_count: Number of seated players

        Returns:
            Roles in seat order: forensic, murderer, optional accomplice, then investigators
        """
        if player_count == 1:
            return [Role.MURDERER]

        roles = [Role.FORENSIC, Role.MURDERER]
        if player_count >= ACCOMPLICE_MIN_PLAYERS:
            roles.append(Role.ACCOMPLICE)
        while len(roles) < player_count:
            roles.append(Role.INVESTIGATOR)
        return roles

    def assign_roles(self, players: List[Player]) -> List[Player]:
        """
        Deal roles to players.

        The players are uniformly permuted and the fixed role sequence is dealt
        to the permuted seats. The returned list keeps the original join order,
        every credential is restored and host flags are untouched.

        Args:
            players: Players in join order

        Returns:
            New Player objects with roles assigned
        """
        seats = list(range(len(players)))
        self._rng.shuffle(seats)
        roles = self.build_role_sequence(len(players))

        role_by_index = {seat: role for seat, role in zip(seats, roles)}
        return [
            replace(player, role=role_by_index[index], has_credential=True)
            for index, player in enumerate(players)
        ]

    def deal_table(self, methods: List[Card], evidences: List[Card]) -> Tuple[List[Card], List[Card]]:
        """
        Deal the face-up table cards from two independent shuffles.

        Args:
            methods: Full method catalog
            evidences: Full evidence catalog

        Returns:
            Tuple of (table methods, table evidences)
        """
        count = self.game_settings.table_cards_per_type

        shuffled_methods = list(methods)
        self._rng.shuffle(shuffled_methods)
        shuffled_evidences = list(evidences)
        self._rng.shuffle(shuffled_evidences)

        return shuffled_methods[:count], shuffled_evidences[:count]
