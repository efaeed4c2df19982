"""
Base writer

Every writer serializes whole-line writes and never lets a failing
stream reach the logging caller.
"""

import sys
import threading
from typing import Dict, Optional, TextIO


class BaseWriter:
    """Line writer over a text stream."""

    enabled = True

    def __init__(self, stream: TextIO, lock: Optional[threading.Lock] = None):
        """
        Initialize writer.

        Args:
            stream: Output stream receiving rendered lines
            lock: Lock to serialize on; writers sharing a stream share it
        """
        self.stream = stream
        self._lock = lock or threading.Lock()
        self._stats: Dict[str, int] = {"written": 0, "errors": 0}

    def write(self, line: str) -> None:
        """Write one rendered line."""
        with self._lock:
            try:
                self.stream.write(line + "\n")
                self._after_write()
                self._stats["written"] += 1
            except Exception as e:
                self._stats["errors"] += 1
                print(f"Writer error: {e}", file=sys.stderr)

    def _after_write(self) -> None:
        """Hook run under the lock after each line."""

    def flush(self) -> None:
        """Flush stream."""
        with self._lock:
            try:
                self.stream.flush()
            except Exception as e:
                self._stats["errors"] += 1
                print(f"Writer error: {e}", file=sys.stderr)

    def close(self) -> None:
        """Flush; the stream itself belongs to the caller."""
        self.flush()

    @property
    def stats(self) -> Dict[str, int]:
        """Get write counters."""
        with self._lock:
            return self._stats.copy()
