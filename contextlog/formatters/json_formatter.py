"""
JSON formatter for structured logging

Formats log entries as one JSON object per line
"""

import json
from contextlog.core.log_entry import LogEntry
from contextlog.formatters.base_formatter import BaseFormatter


class JSONFormatter(BaseFormatter):
    """
    Format log entries as JSON objects.

    Carries the same fields as the logfmt rendering, suitable for log
    aggregation systems.
    """

    def __init__(self, ensure_ascii: bool = False):
        """
        Initialize JSON formatter.

        Args:
            ensure_ascii: Escape non-ASCII characters

        Example:
            formatter = JSONFormatter()
            # {"level": "info", "caller_0": "app.py:3", "msg": "hello"}
        """
        self.ensure_ascii = ensure_ascii

    def format(self, entry: LogEntry) -> str:
        """
        Format log entry as JSON.

        Args:
            entry: Log entry to format

        Returns:
            JSON string on a single line
        """
        return json.dumps(entry.to_dict(), ensure_ascii=self.ensure_ascii)

    def __repr__(self) -> str:
        """String representation."""
        return f"JSONFormatter(ensure_ascii={self.ensure_ascii})"
