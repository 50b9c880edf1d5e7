"""
Per-Identity Locking
====================

Every public operation of the store runs while holding the lock of the
identity it touches.

GUARANTEES:
- Two calls on the same identity never interleave
- Calls on different identities never wait on each other
- Locks exist only while some call holds or waits for them
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Dict, Iterator, List
import threading

from ..contracts.base import Identity


class _LockSlot:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


class IdentityLockTable:
    """Lazily created, reference-counted re-entrant lock per identity."""

    def __init__(self):
        self._guard = threading.Lock()
        self._slots: Dict[str, _LockSlot] = {}

    @contextmanager
    def hold(self, identity: Identity) -> Iterator[None]:
        key = identity.value
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = _LockSlot()
                self._slots[key] = slot
            slot.users += 1

        slot.lock.acquire()
        try:
            yield
        finally:
            slot.lock.release()
            with self._guard:
                slot.users -= 1
                if slot.users == 0:
                    del self._slots[key]

    def active_identities(self) -> List[str]:
        """Identities with a lock currently held or awaited."""
        with self._guard:
            return sorted(self._slots)

    def __len__(self) -> int:
        with self._guard:
            return len(self._slots)
