"""
Per-seid session state
Lock discipline: every read or write of a seid's entry happens while holding
that seid's lock from ``SeidLockRegistry``. Locks are reentrant so a holder
may call other services that take the same lock. Different seids never contend.
"""

import copy
import threading
from contextlib import contextmanager


class SeidLockRegistry:
    """
    Lazily creates one reentrant lock per seid.

    Locks are never evicted: a holder may still be waiting on one. The registry
    grows to one entry per distinct seid seen, which is bounded by the employee
    population.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def __len__(self):
        with self._guard:
            return len(self._locks)

    def lock_for(self, seid):
        key = (seid or "").strip()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, seid):
        lock = self.lock_for(seid)
        with lock:
            yield


class SeidStore:
    """
    Keyed in-memory values owned by one service.
    ``get`` returns a deep copy so callers never see an entry mid-update.
    """

    def __init__(self, locks=None):
        self.locks = locks if locks is not None else SeidLockRegistry()
        self._values = {}

    @staticmethod
    def _key(seid):
        return (seid or "").strip()

    def get(self, seid):
        with self.locks.hold(seid):
            value = self._values.get(self._key(seid))
            return copy.deepcopy(value)

    def put(self, seid, value):
        with self.locks.hold(seid):
            self._values[self._key(seid)] = value

    def pop(self, seid):
        with self.locks.hold(seid):
            return self._values.pop(self._key(seid), None)

    def get_or_create(self, seid, factory):
        with self.locks.hold(seid):
            key = self._key(seid)
            if key not in self._values:
                self._values[key] = factory()
            return copy.deepcopy(self._values[key])

    def update(self, seid, mutate):
        """Apply ``mutate(value)`` to the held entry in place under the seid lock."""
        with self.locks.hold(seid):
            value = self._values.get(self._key(seid))
            if value is None:
                return None
            mutate(value)
            return copy.deepcopy(value)

    def __contains__(self, seid):
        with self.locks.hold(seid):
            return self._key(seid) in self._values
