"""
Main Logger class - immutable, chainable context logger

Every ``with_*`` call returns a new Logger; terminal calls (``log``,
``logf``, ``log_error``, ``log_errorf``) render the accumulated context
and write one line.
"""

from __future__ import annotations
from typing import Any, Dict, Mapping, Optional, Tuple
import re
import sys

from contextlog.core.caller import capture_frames
from contextlog.core.errors import LoggedError, WrappedError, error_text
from contextlog.core.log_context import LogContext
from contextlog.core.log_entry import LogEntry, now_utc
from contextlog.core.log_level import LogLevel
from contextlog.core.logger_config import LoggerConfig
from contextlog.formatters.base_formatter import BaseFormatter
from contextlog.formatters.logfmt_formatter import LogfmtFormatter

# %w is the error placeholder; %% stays a literal percent sign
_WRAP_VERB = re.compile(r"%([%w])")


class Logger:
    """Immutable logger carrying key/value context."""

    __slots__ = ("_writer", "_formatter", "_config", "_context")

    def __init__(
        self,
        writer: Any,
        formatter: Optional[BaseFormatter] = None,
        config: Optional[LoggerConfig] = None,
        context: Optional[LogContext] = None,
    ):
        """
        Initialize logger.

        Args:
            writer: Sink with ``write(line)``; shared by all derived loggers
            formatter: Line renderer (default: LogfmtFormatter)
            config: Rendering configuration
            context: Initial context
        """
        object.__setattr__(self, "_writer", writer)
        object.__setattr__(self, "_formatter", formatter or LogfmtFormatter())
        object.__setattr__(self, "_config", config or LoggerConfig.default())
        object.__setattr__(self, "_context", context or LogContext())

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Logger is immutable; use with_context() to derive one")

    def _derive(self, extra: LogContext) -> "Logger":
        return Logger(
            self._writer,
            self._formatter,
            self._config,
            self._context.extend(extra),
        )

    @property
    def context(self) -> LogContext:
        """Accumulated context."""
        return self._context

    @property
    def writer(self) -> Any:
        """Sink shared by this logger and everything derived from it."""
        return self._writer

    # Context composition

    def with_context(self, *contexts: Any) -> "Logger":
        """
        Derive a logger with additional context.

        Args:
            contexts: LogLevel values, objects with a ``context()``
                      method, or mappings. Later values override earlier
                      ones.

        Returns:
            New Logger; self is unchanged
        """
        extra = LogContext()
        for ctx in contexts:
            extra = extra.extend(LogContext.from_object(ctx))
        return self._derive(extra)

    def with_key_value(self, *key_values: Any) -> "Logger":
        """
        Derive a logger with alternating key, value pairs.

        A trailing key without a value renders as ``key=(MISSING)``.
        """
        return self._derive(LogContext.from_key_values(*key_values))

    def with_map(self, fields: Mapping[Any, Any]) -> "Logger":
        """Derive a logger with every pair of a mapping."""
        return self._derive(LogContext.from_mapping(fields))

    # Level shortcuts

    def debug(self) -> "Logger":
        return self.with_context(LogLevel.DEBUG)

    def info(self) -> "Logger":
        return self.with_context(LogLevel.INFO)

    def warn(self) -> "Logger":
        return self.with_context(LogLevel.WARN)

    def error(self) -> "Logger":
        return self.with_context(LogLevel.ERROR)

    def fatal(self) -> "Logger":
        """
        Mark the line as fatal.

        Exiting the process afterwards is left to the caller.
        """
        return self.with_context(LogLevel.FATAL)

    # Terminal calls

    def log(self, message: str) -> None:
        """Emit message with the accumulated context."""
        self._emit(message)

    def logf(self, fmt: str, *args: Any) -> None:
        """
        Format with printf-style substitution, then emit.

        A format that does not match its arguments is emitted as-is
        with a ``fmt_error`` field.
        """
        message, extra = _sprintf(fmt, args)
        self._emit(message, extra=extra)

    def log_error(self, message: str, err: Optional[BaseException] = None) -> BaseException:
        """
        Log an error and return it.

        Args:
            message: Log message
            err: Error to log; when None an error is created from message

        Returns:
            err itself, or a LoggedError whose text is message
        """
        if err is None:
            err = LoggedError(message)
        elif not isinstance(err, BaseException):
            err = LoggedError(str(err))
        self._emit(message, error=error_text(err))
        return err

    def log_errorf(self, fmt: str, *args: Any) -> WrappedError:
        """
        Format a message around an error, log it and return it wrapped.

        ``%w`` renders an exception argument as its text. The combined
        text is logged as both ``msg`` and ``error``.

        Example:
            err = logger.log_errorf("loading config: %w", exc)
            # str(err) == "loading config: <exc text>"
            # err.unwrap() is exc

        Returns:
            WrappedError whose cause is the first exception argument
        """
        if not args:
            message = _WRAP_VERB.sub(lambda m: "%" if m.group(1) == "%" else "%w", fmt)
            self._emit(message, error=message)
            return WrappedError(message)

        cause = next((a for a in args if isinstance(a, BaseException)), None)
        rendered = tuple(error_text(a) if isinstance(a, BaseException) else a for a in args)
        message, extra = _sprintf(
            _WRAP_VERB.sub(lambda m: "%%" if m.group(1) == "%" else "%s", fmt),
            rendered,
        )
        if extra:
            # Unformattable: keep the caller's format and still carry the cause
            message = f"{fmt}: {error_text(cause)}" if cause is not None else fmt
        self._emit(message, error=message, extra=extra)
        return WrappedError(message, cause)

    def _emit(
        self,
        message: str,
        error: Optional[str] = None,
        extra: Optional[Dict[str, str]] = None,
    ) -> None:
        writer = self._writer
        if not getattr(writer, "enabled", True):
            return

        entry = LogEntry(
            message=message,
            fields=self._context.fields(),
            callers=capture_frames(depth=self._config.caller_depth),
            error=error,
            timestamp=now_utc() if self._config.timestamps else None,
            extra=extra or {},
        )

        try:
            line = self._formatter.format(entry)
        except Exception as e:
            print(f"Formatter error: {e}", file=sys.stderr)
            return
        writer.write(line)

    def __repr__(self) -> str:
        return f"Logger(context={self._context.fields()!r}, formatter={self._formatter!r})"


def _sprintf(fmt: str, args: Tuple[Any, ...]) -> Tuple[str, Dict[str, str]]:
    if not args:
        return str(fmt), {}
    if len(args) == 1 and isinstance(args[0], Mapping):
        args = args[0]
    try:
        return fmt % args, {}
    except (TypeError, ValueError, KeyError) as e:
        return str(fmt), {"fmt_error": str(e)}
