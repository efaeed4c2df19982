"""In-memory writer for capturing rendered output in tests"""

import io
from typing import List

from contextlog.writers.base_writer import BaseWriter


class BufferWriter(BaseWriter):
    """Collect log lines in memory."""

    def __init__(self):
        super().__init__(io.StringIO())

    def getvalue(self) -> str:
        """Everything written so far."""
        with self._lock:
            return self.stream.getvalue()

    def lines(self) -> List[str]:
        """Written lines, without newlines."""
        return self.getvalue().splitlines()

    def clear(self) -> None:
        """Discard captured output."""
        with self._lock:
            self.stream.seek(0)
            self.stream.truncate(0)

    def __str__(self) -> str:
        return self.getvalue()
