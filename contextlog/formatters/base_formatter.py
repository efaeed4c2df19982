"""
Base formatter interface
"""

from abc import ABC, abstractmethod
from contextlog.core.log_entry import LogEntry


class BaseFormatter(ABC):
    """
    Abstract base class for log formatters.

    Formatters convert LogEntry objects into a single line of text.
    """

    @abstractmethod
    def format(self, entry: LogEntry) -> str:
        """
        Format a log entry into a string.

        Args:
            entry: The log entry to format

        Returns:
            Formatted line, without a trailing newline
        """
        pass

    def __call__(self, entry: LogEntry) -> str:
        """Allow formatters to be callable."""
        return self.format(entry)


class NopFormatter(BaseFormatter):
    """Formatter for disabled logging."""

    def format(self, entry: LogEntry) -> str:
        return ""

    def __repr__(self) -> str:
        return "NopFormatter()"
