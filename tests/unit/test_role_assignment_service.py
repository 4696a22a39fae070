"""
Unit tests for RoleAssignmentService.
"""

import random
from collections import Counter

import pytest

from config_factory import AppConfig
from src.config.game_settings import GameSettings
from src.core.game_phases import Role
from src.core.game_state import Card, Player
from src.services.role_assignment_service import RoleAssignmentService


def seated(count):
    return [Player(id=f"p{i}", name=f"Player {i}", is_host=(i == 0)) for i in range(count)]


class TestRoleSequence:
    """Test the positional role list"""

    def setup_method(self):
        self.service = RoleAssignmentService(GameSettings(AppConfig(min_players_required=1)), random.Random(1))

    def test_solo_table_is_murderer_only(self):
        assert self.service.build_role_sequence(1) == [Role.MURDERER]

    @pytest.mark.parametrize("count", [2, 3, 4])
    def test_small_tables_have_no_accomplice(self, count):
        roles = Counter(self.service.build_role_sequence(count))

        assert roles[Role.FORENSIC] == 1
        assert roles[Role.MURDERER] == 1
        assert roles[Role.ACCOMPLICE] == 0
        assert roles[Role.INVESTIGATOR] == count - 2

    @pytest.mark.parametrize("count", [5, 8, 12])
    def test_five_or_more_add_an_accomplice(self, count):
        roles = Counter(self.service.build_role_sequence(count))

        assert roles[Role.FORENSIC] == 1
        assert roles[Role.MURDERER] == 1
        assert roles[Role.ACCOMPLICE] == 1
        assert roles[Role.INVESTIGATOR] == count - 3


class TestAssignRoles:
    """Test dealing roles to players"""

    def setup_method(self):
        self.service = RoleAssignmentService(GameSettings(AppConfig(min_players_required=1)), random.Random(11))

    def test_roles_dealt_match_sequence(self):
        players = seated(6)

        dealt = self.service.assign_roles(players)

        assert Counter(p.role for p in dealt) == Counter(self.service.build_role_sequence(6))

    def test_join_order_and_host_preserved(self):
        players = seated(5)

        dealt = self.service.assign_roles(players)

        assert [p.id for p in dealt] == [p.id for p in players]
        assert [p.is_host for p in dealt] == [True, False, False, False, False]
        # Originals are not mutated
        assert all(p.role is None for p in players)

    def test_credentials_restored(self):
        players = seated(4)
        players[2].has_credential = False

        dealt = self.service.assign_roles(players)

        assert all(p.has_credential for p in dealt)

    def test_seeded_rng_is_reproducible(self):
        first = RoleAssignmentService(self.service.game_settings, random.Random(99)).assign_roles(seated(7))
        second = RoleAssignmentService(self.service.game_settings, random.Random(99)).assign_roles(seated(7))

        assert [p.role for p in first] == [p.role for p in second]

    def test_murderer_seat_is_uniform(self):
        """Each seat of a four-player table is equally likely to draw the murderer."""
        trials = 4000
        seats = Counter()
        for _ in range(trials):
            dealt = self.service.assign_roles(seated(4))
            seats[next(i for i, p in enumerate(dealt) if p.role == Role.MURDERER)] += 1

        expected = trials / 4
        chi_square = sum((seats[i] - expected) ** 2 / expected for i in range(4))
        # 3 degrees of freedom, p = 0.001
        assert chi_square < 16.27

    def test_forensic_seat_is_uniform(self):
        trials = 4000
        seats = Counter()
        for _ in range(trials):
            dealt = self.service.assign_roles(seated(4))
            seats[next(i for i, p in enumerate(dealt) if p.role == Role.FORENSIC)] += 1

        expected = trials / 4
        chi_square = sum((seats[i] - expected) ** 2 / expected for i in range(4))
        assert chi_square < 16.27

    def test_role_arrangements_are_uniform(self):
        """
        A four-player table has 4!/2! = 12 distinct arrangements of
        (forensic, murderer, investigator, investigator); each is equally likely.
        """
        trials = 6000
        arrangements = Counter(
            tuple(p.role for p in self.service.assign_roles(seated(4)))
            for _ in range(trials)
        )

        assert len(arrangements) == 12
        expected = trials / 12
        chi_square = sum((count - expected) ** 2 / expected for count in arrangements.values())
        # 11 degrees of freedom, p = 0.001
        assert chi_square < 31.26


class TestDealTable:
    """Test dealing face-up table cards"""

    def setup_method(self):
        self.service = RoleAssignmentService(GameSettings(AppConfig(min_players_required=1)), random.Random(5))
        self.methods = [Card(id=f"method_{i}", type='method', name=f"M{i}") for i in range(1, 13)]
        self.evidences = [Card(id=f"evidence_{i}", type='evidence', name=f"E{i}") for i in range(1, 13)]

    def test_deals_four_distinct_of_each(self):
        methods, evidences = self.service.deal_table(self.methods, self.evidences)

        assert len(methods) == 4
        assert len(evidences) == 4
        assert len(set(methods)) == 4
        assert len(set(evidences)) == 4
        assert set(methods) <= set(self.methods)
        assert set(evidences) <= set(self.evidences)

    def test_catalog_lists_are_not_reordered(self):
        original = list(self.methods)

        self.service.deal_table(self.methods, self.evidences)

        assert self.methods == original

    def test_table_size_follows_settings(self):
        service = RoleAssignmentService(
            GameSettings(AppConfig(min_players_required=1, table_cards_per_type=6)), random.Random(5)
        )

        methods, evidences = service.deal_table(self.methods, self.evidences)

        assert len(methods) == 6
        assert len(evidences) == 6
