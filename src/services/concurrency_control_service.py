"""
Concurrency Control Service for Crime Scene

Serializes read-modify-write cycles per room so that two requests against
the same room cannot interleave, while different rooms proceed in parallel.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict

logger = logging.getLogger(__name__)


class ConcurrencyControlService:
    """Manages per-room locks."""

    def __init__(self):
        # Per-room locks for fine-grained control
        self._room_locks: Dict[str, threading.RLock] = {}
        # Lock for managing room locks themselves
        self._locks_lock = threading.Lock()

    def get_room_lock(self, room_code: str) -> threading.RLock:
        """Get or create a lock for a specific room."""
        with self._locks_lock:
            if room_code not in self._room_locks:
                self._room_locks[room_code] = threading.RLock()
            return self._room_locks[room_code]

    def cleanup_room_lock(self, room_code: str):
        """Clean up lock for a deleted room."""
        with self._locks_lock:
            if room_code in self._room_locks:
                del self._room_locks[room_code]

    @contextmanager
    def room_operation(self, room_code: str):
        """Context manager for thread-safe room operations."""
        room_lock = self.get_room_lock(room_code)
        with room_lock:
            yield

    def active_lock_count(self) -> int:
        with self._locks_lock:
            return len(self._room_locks)
