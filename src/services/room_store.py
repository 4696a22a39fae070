"""
Room Store for Crime Scene

Keyed persistence for room state snapshots. Records are JSON-shaped dicts
addressed by ``"room:" + room_code``.
"""

import copy
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ROOM_KEY_PREFIX = "room:"


def room_key(room_code: str) -> str:
    """Build the store key for a room code."""
    return f"{ROOM_KEY_PREFIX}{room_code}"


class RoomStore(ABC):
    """Abstract key-value store consumed by the room manager."""

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the record stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any]) -> None:
        """Store a record under key, replacing any previous one."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the record under key. Returns False if there was none."""

    def exists(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryRoomStore(RoomStore):
    """Process-local store. Reads and writes copy, so callers never share records."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            value = self._data.get(key)
            return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        with self._lock:
            if key in self._data:
                del self._data[key]
                return True
            return False

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
