"""Reader/writer lock guarding a document store and its metadata index."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class ReadWriteLock:
    """Many concurrent readers or one writer, with waiting writers preferred.

    A thread that already holds the read lock may take it again without
    queueing behind a waiting writer. A thread holding the write lock may
    re-enter it and may also read. Upgrading a read lock to a write lock
    is refused with RuntimeError, since it could never be granted.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._writer_depth = 0
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        """Block until shared access is granted."""
        me = threading.get_ident()
        with self._cond:
            if me == self._writer or me in self._readers:
                self._readers[me] = self._readers.get(me, 0) + 1
                return
            while self._writer is not None or self._waiting_writers:
                self._cond.wait()
            self._readers[me] = 1

    def release_read(self) -> None:
        """Release one level of shared access held by the calling thread."""
        me = threading.get_ident()
        with self._cond:
            count = self._readers.get(me, 0)
            if count == 0:
                raise RuntimeError("release_read called without holding the read lock")
            if count == 1:
                del self._readers[me]
                if not self._readers:
                    self._cond.notify_all()
            else:
                self._readers[me] = count - 1

    def acquire_write(self) -> None:
        """Block until exclusive access is granted."""
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._writer_depth += 1
                return
            if me in self._readers:
                raise RuntimeError("cannot upgrade a read lock to a write lock")
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = me
            self._writer_depth = 1

    def release_write(self) -> None:
        """Release one level of exclusive access."""
        with self._cond:
            if self._writer != threading.get_ident():
                raise RuntimeError("release_write called by a thread not holding the write lock")
            self._writer_depth -= 1
            if self._writer_depth == 0:
                self._writer = None
                self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold shared access for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold exclusive access for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
