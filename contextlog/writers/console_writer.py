"""Console writer"""

import sys
import threading
import weakref
from typing import Optional, TextIO

from contextlog.writers.base_writer import BaseWriter

# One lock per stream, so every writer on sys.stdout shares a critical section
_stream_locks: "weakref.WeakKeyDictionary[TextIO, threading.Lock]" = weakref.WeakKeyDictionary()
_stream_locks_guard = threading.Lock()


def stream_lock(stream: TextIO) -> threading.Lock:
    """Return the lock shared by all console writers on stream."""
    with _stream_locks_guard:
        try:
            lock = _stream_locks.get(stream)
            if lock is None:
                lock = _stream_locks[stream] = threading.Lock()
        except TypeError:
            # Stream does not support weak references
            lock = threading.Lock()
        return lock


class ConsoleWriter(BaseWriter):
    """Write log lines to the console."""

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Initialize console writer.

        Args:
            stream: Output stream (default: sys.stdout)
        """
        stream = stream or sys.stdout
        super().__init__(stream, lock=stream_lock(stream))

    def _after_write(self) -> None:
        self.stream.flush()
