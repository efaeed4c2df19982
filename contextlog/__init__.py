"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

contextlog - Structured, contextual logging with immutable loggers
"""

__version__ = "1.0.0"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

from typing import Optional, TextIO, Tuple

from contextlog.core.logger import Logger
from contextlog.core.logger_builder import LoggerBuilder
from contextlog.core.log_context import LogContext
from contextlog.core.log_entry import LogEntry
from contextlog.core.log_level import LogLevel
from contextlog.core.logger_config import LoggerConfig
from contextlog.core.caller import Frame, capture_frames
from contextlog.core.errors import LoggedError, WrappedError, unwrap, is_error
from contextlog.writers.buffer_writer import BufferWriter

# Import submodules (not all classes by default)
from contextlog import formatters
from contextlog import writers

DEBUG = LogLevel.DEBUG
INFO = LogLevel.INFO
WARN = LogLevel.WARN
ERROR = LogLevel.ERROR
FATAL = LogLevel.FATAL


def new_default_logger(stream: Optional[TextIO] = None) -> Logger:
    """Logger configured from LOG_FORMAT and friends, writing to stdout."""
    return LoggerBuilder(LoggerConfig.from_env()).with_console(stream).build()


def new_json_logger(stream: Optional[TextIO] = None) -> Logger:
    """Logger writing one JSON object per line to stdout."""
    return LoggerBuilder().with_json().with_console(stream).build()


def new_nop_logger() -> Logger:
    """Logger that discards everything."""
    return LoggerBuilder(LoggerConfig.nop_config()).build()


def new_buffer_logger() -> Tuple[BufferWriter, Logger]:
    """
    Logger writing to memory, for asserting on rendered lines.

    Example:
        buffer, logger = new_buffer_logger()
        logger.log("my message")
        assert "level=info" in buffer.getvalue()
    """
    buffer = BufferWriter()
    logger = LoggerBuilder(LoggerConfig.test_config()).with_writer(buffer).build()
    return buffer, logger


__all__ = [
    "Logger",
    "LoggerBuilder",
    "LogContext",
    "LogEntry",
    "LogLevel",
    "LoggerConfig",
    "Frame",
    "capture_frames",
    "LoggedError",
    "WrappedError",
    "unwrap",
    "is_error",
    "BufferWriter",
    "DEBUG",
    "INFO",
    "WARN",
    "ERROR",
    "FATAL",
    "new_default_logger",
    "new_json_logger",
    "new_nop_logger",
    "new_buffer_logger",
    "formatters",
    "writers",
]
