"""
Card Catalog for Crime Scene

Handles loading and validation of the YAML file containing the method,
evidence and forensic clue cards. The catalog is read-only once loaded.
"""

import os
import yaml
from typing import Dict, List, Optional, Any
import logging

from src.core.game_phases import ClueCategory
from src.core.game_state import Card, ClueCard

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CARDS_FILE = os.path.join(PROJECT_ROOT, 'cards.yaml')

METHOD_CARD = 'method'
EVIDENCE_CARD = 'evidence'


class CatalogValidationError(Exception):
    """Raised when card catalog validation fails."""
    pass


def resolve_cards_path(path: Optional[str]) -> str:
    """Resolve a configured catalog path, falling back to the project root for relative paths."""
    if not path:
        return DEFAULT_CARDS_FILE
    if os.path.isabs(path) or os.path.exists(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


class CardCatalog:
    """Manages loading and lookup of the static card sets."""

    def __init__(self, yaml_file_path: Optional[str] = None):
        """
        Initialize CardCatalog with path to YAML file.

        Args:
            yaml_file_path: Path to the YAML card file; defaults to cards.yaml at the project root
        """
        self.yaml_file_path = resolve_cards_path(yaml_file_path)
        self.methods: List[Card] = []
        self.evidences: List[Card] = []
        self.clues: Dict[ClueCategory, List[ClueCard]] = {}
        self._loaded = False

    def load_cards_from_yaml(self) -> None:
        """
        Load the card sets from the YAML file.

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            CatalogValidationError: If YAML structure is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        try:
            with open(self.yaml_file_path, 'r', encoding='utf-8') as file:
                data = yaml.safe_load(file)

            self.load_from_dict(data)
            logger.info(
                f"Loaded {len(self.methods)} methods, {len(self.evidences)} evidences and "
                f"{self.get_clue_count()} clues from {self.yaml_file_path}"
            )
        except FileNotFoundError:
            logger.error(f"Card file not found: {self.yaml_file_path}")
            raise
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            raise
        except CatalogValidationError as e:
            logger.error(f"Card catalog validation error: {e}")
            raise

    def load_from_dict(self, data: Any) -> None:
        """Validate and load already-parsed catalog data."""
        self.validate_yaml_structure(data)
        self.methods = self._parse_cards(data['methods'], METHOD_CARD)
        self.evidences = self._parse_cards(data['evidences'], EVIDENCE_CARD)
        self.clues = {
            ClueCategory(category): [
                ClueCard(id=item['id'].strip(), category=ClueCategory(category), name=item['name'].strip())
                for item in items
            ]
            for category, items in data['clues'].items()
        }
        self._loaded = True

    def validate_yaml_structure(self, data: Any) -> None:
        """
        Validate the structure of loaded YAML data.

        Raises:
            CatalogValidationError: If structure is invalid
        """
        if not isinstance(data, dict):
            raise CatalogValidationError("YAML root must be a dictionary")

        for key in ('methods', 'evidences', 'clues'):
            if key not in data:
                raise CatalogValidationError(f"YAML must contain '{key}' key")

        self._validate_card_list(data['methods'], 'methods')
        self._validate_card_list(data['evidences'], 'evidences')

        clues = data['clues']
        if not isinstance(clues, dict) or not clues:
            raise CatalogValidationError("'clues' must be a non-empty mapping of category to cards")

        known_categories = {c.value for c in ClueCategory}
        for category, items in clues.items():
            if category not in known_categories:
                raise CatalogValidationError(f"Unknown clue category '{category}'")
            self._validate_card_list(items, f"clues.{category}")

        all_ids = [item['id'] for item in data['methods']] + [item['id'] for item in data['evidences']]
        for items in clues.values():
            all_ids.extend(item['id'] for item in items)
        if len(all_ids) != len(set(all_ids)):
            raise CatalogValidationError("Duplicate card IDs found")

    def _validate_card_list(self, items: Any, label: str) -> None:
        if not isinstance(items, list):
            raise CatalogValidationError(f"'{label}' must be a list")

        if len(items) == 0:
            raise CatalogValidationError(f"'{label}' list cannot be empty")

        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise CatalogValidationError(f"{label} item {i} must be a dictionary")
            for field in ('id', 'name'):
                if not isinstance(item.get(field), str) or not item[field].strip():
                    raise CatalogValidationError(
                        f"{label} item {i} field '{field}' must be a non-empty string"
                    )

    def _parse_cards(self, items: List[Dict[str, Any]], card_type: str) -> List[Card]:
        return [Card(id=item['id'].strip(), type=card_type, name=item['name'].strip()) for item in items]

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("No cards loaded. Call load_cards_from_yaml() first.")

    def get_methods(self) -> List[Card]:
        """Get a copy of every method card."""
        self._require_loaded()
        return self.methods.copy()

    def get_evidences(self) -> List[Card]:
        """Get a copy of every evidence card."""
        self._require_loaded()
        return self.evidences.copy()

    def get_clue_cards(self, category: Optional[ClueCategory] = None) -> List[ClueCard]:
        """
        Get clue cards, optionally restricted to one category.

        Args:
            category: Category to filter by, or None for all clue cards

        Returns:
            List of ClueCard objects
        """
        self._require_loaded()
        if category is not None:
            return list(self.clues.get(category, []))
        return [card for cards in self.clues.values() for card in cards]

    def has_clue(self, category: ClueCategory, card_name: str) -> bool:
        """Check whether a clue card with this name exists under the category."""
        self._require_loaded()
        return any(card.name == card_name for card in self.clues.get(category, []))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the catalog for clients."""
        self._require_loaded()
        return {
            'methods': [card.to_dict() for card in self.methods],
            'evidences': [card.to_dict() for card in self.evidences],
            'clues': {
                category.value: [card.to_dict() for card in cards]
                for category, cards in self.clues.items()
            }
        }

    def is_loaded(self) -> bool:
        """Check if cards have been loaded."""
        return self._loaded

    def get_clue_count(self) -> int:
        return sum(len(cards) for cards in self.clues.values())
