"""Shared/exclusive lock used by the registry and :class:`~gamebackend.safemap.SafeMap`.

Readers wait on one condition, writers on another; both share a single
mutex. A pending writer closes the gate to new readers, and a finishing
writer hands over to the next waiting writer before letting readers back in.
The lock is not reentrant in either mode.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._can_read = threading.Condition(self._mutex)
        self._can_write = threading.Condition(self._mutex)
        self._active_readers = 0
        self._pending_writers = 0
        self._writing = False

    # -----------------------------
    # Shared mode
    # -----------------------------

    def acquire_read(self) -> None:
        with self._mutex:
            self._can_read.wait_for(lambda: not (self._writing or self._pending_writers))
            self._active_readers += 1

    def release_read(self) -> None:
        with self._mutex:
            self._active_readers -= 1
            if self._active_readers == 0:
                self._can_write.notify()

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    # -----------------------------
    # Exclusive mode
    # -----------------------------

    def acquire_write(self) -> None:
        with self._mutex:
            self._pending_writers += 1
            try:
                self._can_write.wait_for(lambda: not (self._writing or self._active_readers))
            finally:
                self._pending_writers -= 1
            self._writing = True

    def release_write(self) -> None:
        with self._mutex:
            self._writing = False
            if self._pending_writers:
                self._can_write.notify()
            else:
                self._can_read.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


__all__ = ["ReadWriteLock"]
