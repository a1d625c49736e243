"""Thread-safe key/value store backing both registry indices."""
from __future__ import annotations

from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

from .rwlock import ReadWriteLock

K = TypeVar("K")
V = TypeVar("V")


class SafeMap(Generic[K, V]):
    """A ``dict`` guarded by one :class:`ReadWriteLock`.

    Lookups take the lock in shared mode; every mutation takes it
    exclusively. Each critical section is a single dictionary access, so no
    call blocks for longer than another caller's O(1) map operation.

    Instantiate one map per key/value pairing, e.g. ``SafeMap[str, Account]``.
    """

    def __init__(self) -> None:
        self._data: Dict[K, V] = {}
        self._lock = ReadWriteLock()

    # -----------------------------
    # Point operations
    # -----------------------------

    def get(self, key: K) -> Tuple[Optional[V], bool]:
        """Return ``(value, True)`` for a present *key*, ``(None, False)`` otherwise."""
        with self._lock.read():
            if key in self._data:
                return self._data[key], True
            return None, False

    def set(self, key: K, value: V) -> None:
        """Store *value* under *key*, replacing any previous entry."""
        with self._lock.write():
            self._data[key] = value

    def delete(self, key: K) -> None:
        """Remove *key*; silently ignores keys that are not present."""
        with self._lock.write():
            self._data.pop(key, None)

    def contains(self, key: K) -> bool:
        with self._lock.read():
            return key in self._data

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._data)

    # -----------------------------
    # Compound operations
    # -----------------------------

    def update(self, key: K, func: Callable[[Optional[V]], V], default: Optional[V] = None) -> V:
        """Atomically replace the value at *key* with ``func(current)``.

        *func* receives the stored value, or *default* when *key* is absent,
        and returns the value to store. The write lock is held across the
        read, the call and the store, so concurrent updates of the same map
        are applied one after another. If *func* raises, the map is left
        untouched and the exception propagates to the caller.
        """
        with self._lock.write():
            new_value = func(self._data.get(key, default))
            self._data[key] = new_value
            return new_value


__all__ = ["SafeMap"]
