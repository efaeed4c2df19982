"""
Core module for logger system

This module contains the fundamental classes:
- Logger: Immutable context logger
- LoggerBuilder: Builder pattern for logger construction
- LogContext: Immutable key/value context
- LogEntry: Rendered line data structure
- LogLevel: Log level enumeration
- LoggerConfig: Configuration management
"""

from contextlog.core.logger import Logger
from contextlog.core.logger_builder import LoggerBuilder
from contextlog.core.log_context import LogContext, MISSING_VALUE
from contextlog.core.log_entry import LogEntry
from contextlog.core.log_level import LogLevel
from contextlog.core.logger_config import LoggerConfig
from contextlog.core.caller import Frame, capture_frames
from contextlog.core.errors import LoggedError, WrappedError, unwrap, is_error

__all__ = [
    "Logger",
    "LoggerBuilder",
    "LogContext",
    "MISSING_VALUE",
    "LogEntry",
    "LogLevel",
    "LoggerConfig",
    "Frame",
    "capture_frames",
    "LoggedError",
    "WrappedError",
    "unwrap",
    "is_error",
]
