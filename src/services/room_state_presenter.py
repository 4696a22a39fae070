"""
Room State Presenter - Centralized room state transformation for polling clients.

This service provides canonical transformations for room state data that is
sent to clients, ensuring consistent payload shapes.
"""

import logging
from typing import Any, Dict, Optional

from src.core.game_phases import GamePhase, Role
from src.core.game_state import GameState, MurdererChoice

logger = logging.getLogger(__name__)


class RoomStatePresenter:
    """Centralized service for transforming room state data for clients."""

    def __init__(self, card_catalog):
        """Initialize the room state presenter.

        Args:
            card_catalog: Loaded card catalog served to clients
        """
        self.card_catalog = card_catalog

    def present_game_state(self, state: GameState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        """Create the game state payload returned to a polling client.

        Without a viewer the full state is returned. With a viewer id, the
        murderer's secret choice is blanked unless the viewer is the murderer
        or the game is over.

        Args:
            state: Current room state
            viewer_id: Optional id of the requesting player

        Returns:
            Dict in the camelCase wire shape
        """
        payload = state.to_dict()
        if viewer_id is None:
            return payload

        viewer = state.find_player(viewer_id)
        may_see_choice = (
            state.phase == GamePhase.GAME_OVER
            or (viewer is not None and viewer.role == Role.MURDERER)
        )
        if not may_see_choice:
            payload['murdererChoice'] = MurdererChoice().to_dict()
        return payload

    def present_catalog(self) -> Dict[str, Any]:
        """Card catalog payload for building the clue and accusation pickers."""
        return self.card_catalog.to_dict()
