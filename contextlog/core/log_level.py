"""
Log level enumeration

A level is also a context: decorating a logger with a level sets the
reserved ``level`` field.
"""

from enum import IntEnum
from typing import Dict


class LogLevel(IntEnum):
    """
    Log level enumeration.

    Rendered in lowercase (``level=info``).
    """

    DEBUG = 10      # Debug information
    INFO = 20       # Informational messages
    WARN = 30       # Warning messages
    ERROR = 40      # Error messages
    FATAL = 50      # Fatal errors, the caller decides whether to exit

    def __str__(self) -> str:
        """String representation of log level."""
        return self.name.lower()

    def context(self) -> Dict[str, str]:
        """Context pairs contributed by this level."""
        return {LEVEL_KEY: str(self)}

    @classmethod
    def from_string(cls, level_str: str) -> "LogLevel":
        """
        Convert string to LogLevel.

        Args:
            level_str: Level name (case-insensitive)

        Returns:
            LogLevel enum value

        Raises:
            ValueError: If level_str is not valid
        """
        name = level_str.strip().upper()
        name = LEVEL_ALIASES.get(name, name)
        if name in cls.__members__:
            return cls[name]
        raise ValueError(f"Invalid log level: {level_str}")

    @property
    def color_code(self) -> str:
        """
        Get ANSI color code for this level.

        Returns:
            ANSI escape sequence
        """
        colors = {
            LogLevel.DEBUG: "\033[36m",     # Cyan
            LogLevel.INFO: "\033[32m",      # Green
            LogLevel.WARN: "\033[33m",      # Yellow
            LogLevel.ERROR: "\033[31m",     # Red
            LogLevel.FATAL: "\033[35m",     # Magenta
        }
        return colors.get(self, "\033[0m")

    @property
    def reset_code(self) -> str:
        """ANSI reset code."""
        return "\033[0m"


LEVEL_KEY = "level"

DEFAULT_LEVEL = LogLevel.INFO

LEVEL_ALIASES: Dict[str, str] = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}
