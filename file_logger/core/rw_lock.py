"""
Read/write lock

Many readers or one writer. A waiting writer blocks new readers so that
rotation is never starved by a steady stream of log calls.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """
    Shared/exclusive lock built on a single condition variable.

    There is no in-place upgrade: callers that need exclusive access while
    holding a read lock must release it, acquire the write lock and re-check
    whatever condition sent them there.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        """Acquire shared access."""
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        """Release shared access."""
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() without matching acquire_read()")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        """Acquire exclusive access."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        """Release exclusive access."""
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() without matching acquire_write()")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Context manager holding shared access."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Context manager holding exclusive access."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        """Number of threads currently holding shared access."""
        with self._cond:
            return self._readers

    @property
    def write_held(self) -> bool:
        """Whether some thread currently holds exclusive access."""
        with self._cond:
            return self._writer
