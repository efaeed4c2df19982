"""
Logger configuration management
"""

from dataclasses import dataclass
from typing import Mapping, Optional
import os

FORMAT_LOGFMT = "logfmt"
FORMAT_JSON = "json"
FORMAT_NOP = "nop"

# Accepted spellings of LOG_FORMAT
FORMAT_ALIASES = {
    "": FORMAT_LOGFMT,
    "plain": FORMAT_LOGFMT,
    "logfmt": FORMAT_LOGFMT,
    "text": FORMAT_LOGFMT,
    "json": FORMAT_JSON,
    "nop": FORMAT_NOP,
    "none": FORMAT_NOP,
    "off": FORMAT_NOP,
}

# Context key a configured logger name is rendered under
NAME_KEY = "logger"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class LoggerConfig:
    """Logger configuration."""

    # Basic settings; a name is rendered as a `logger` field on every line
    name: Optional[str] = None
    format: str = FORMAT_LOGFMT

    # Rendering settings
    caller_depth: int = 2
    timestamps: bool = True
    colored_output: bool = False
    ensure_ascii: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        fmt = FORMAT_ALIASES.get(str(self.format).lower())
        if fmt is None:
            raise ValueError(f"Invalid log format: {self.format}")
        self.format = fmt
        if self.caller_depth < 1:
            raise ValueError("caller_depth must be at least 1")

    @classmethod
    def default(cls) -> "LoggerConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def json_config(cls) -> "LoggerConfig":
        """Create configuration for machine-readable output."""
        return cls(format=FORMAT_JSON)

    @classmethod
    def nop_config(cls) -> "LoggerConfig":
        """Create configuration that disables output."""
        return cls(format=FORMAT_NOP)

    @classmethod
    def test_config(cls) -> "LoggerConfig":
        """Create configuration for tests: no timestamps, one caller frame."""
        return cls(timestamps=False, caller_depth=1)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggerConfig":
        """
        Create configuration from environment variables.

        Reads LOG_NAME, LOG_FORMAT, LOG_CALLER_DEPTH, LOG_TIMESTAMPS and
        LOG_COLOR.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        config = cls(
            name=env.get("LOG_NAME", "").strip() or None,
            format=env.get("LOG_FORMAT", FORMAT_LOGFMT).strip(),
        )

        depth = env.get("LOG_CALLER_DEPTH", "").strip()
        if depth:
            try:
                config.caller_depth = int(depth)
            except ValueError:
                raise ValueError(f"Invalid LOG_CALLER_DEPTH: {depth}") from None
            if config.caller_depth < 1:
                raise ValueError("caller_depth must be at least 1")

        timestamps = _parse_bool(env, "LOG_TIMESTAMPS")
        if timestamps is not None:
            config.timestamps = timestamps

        colored = _parse_bool(env, "LOG_COLOR")
        if colored is not None:
            config.colored_output = colored

        return config


def _parse_bool(env: Mapping[str, str], name: str) -> Optional[bool]:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return None
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {name}: {raw}")
