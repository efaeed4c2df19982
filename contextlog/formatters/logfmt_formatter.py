"""
Logfmt formatter for human-readable structured lines

Produces ``key=value`` fields separated by spaces, e.g.::

    ts=2024-01-01T00:00:00.000Z level=info caller_0=app.py:12 msg="service started"
"""

from contextlog.core.log_entry import LogEntry
from contextlog.core.log_level import LogLevel
from contextlog.formatters.base_formatter import BaseFormatter

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def needs_quoting(value: str) -> bool:
    """Check whether a value must be wrapped in double quotes."""
    if value == "":
        return True
    for ch in value:
        if ch <= " " or ch in ('=', '"') or ch == "\x7f":
            return True
    return False


def quote_value(value: str) -> str:
    """Render a value, quoting and escaping it when required."""
    if not needs_quoting(value):
        return value
    escaped = []
    for ch in value:
        if ch in _ESCAPES:
            escaped.append(_ESCAPES[ch])
        elif ch < " " or ch == "\x7f":
            escaped.append(f"\\u{ord(ch):04x}")
        else:
            escaped.append(ch)
    return '"' + "".join(escaped) + '"'


def clean_key(key: str) -> str:
    """Keys may not contain spaces, '=' or '"'."""
    if not key:
        return "_"
    return "".join("_" if (ch <= " " or ch in ('=', '"')) else ch for ch in key)


class LogfmtFormatter(BaseFormatter):
    """
    Format log entries as logfmt lines.

    Default renderer for console and buffer loggers.
    """

    def __init__(self, colored: bool = False):
        """
        Initialize logfmt formatter.

        Args:
            colored: Wrap the whole line in the level's ANSI color
        """
        self.colored = colored

    def format(self, entry: LogEntry) -> str:
        """
        Format log entry as a logfmt line.

        Args:
            entry: Log entry to format

        Returns:
            Formatted line
        """
        line = " ".join(
            f"{clean_key(key)}={quote_value(value)}" for key, value in entry.to_pairs()
        )
        if self.colored:
            try:
                level = LogLevel.from_string(entry.level)
            except ValueError:
                return line
            return f"{level.color_code}{line}{level.reset_code}"
        return line

    def __repr__(self) -> str:
        """String representation."""
        return f"LogfmtFormatter(colored={self.colored})"
