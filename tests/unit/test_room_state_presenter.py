"""
Unit tests for RoomStatePresenter.
"""

from unittest.mock import Mock

from src.core.game_phases import GamePhase, Role
from src.services.room_state_presenter import RoomStatePresenter
from tests.helpers.game_helpers import build_playing_state

HIDDEN_CHOICE = {'methodId': None, 'evidenceId': None}


class TestRoomStatePresenter:
    """Test the polling payload."""

    def setup_method(self):
        self.catalog = Mock()
        self.presenter = RoomStatePresenter(self.catalog)
        # p0 forensic, p1 murderer, p2 investigator
        self.state = build_playing_state([Role.FORENSIC, Role.MURDERER, Role.INVESTIGATOR])

    def test_full_state_without_viewer(self):
        payload = self.presenter.present_game_state(self.state)

        assert payload == self.state.to_dict()
        assert payload['murdererChoice'] == {'methodId': 'method_3', 'evidenceId': 'evidence_7'}

    def test_choice_hidden_from_other_players(self):
        for viewer in ('p0', 'p2', 'unknown'):
            payload = self.presenter.present_game_state(self.state, viewer)
            assert payload['murdererChoice'] == HIDDEN_CHOICE

    def test_choice_visible_to_murderer(self):
        payload = self.presenter.present_game_state(self.state, 'p1')

        assert payload['murdererChoice']['methodId'] == 'method_3'

    def test_choice_revealed_after_game_over(self):
        self.state.phase = GamePhase.GAME_OVER

        payload = self.presenter.present_game_state(self.state, 'p2')

        assert payload['murdererChoice']['evidenceId'] == 'evidence_7'

    def test_catalog_passthrough(self):
        self.catalog.to_dict.return_value = {'methods': []}

        assert self.presenter.present_catalog() == {'methods': []}
