"""Logger builder pattern"""

from typing import Any, Dict, Mapping, Optional, TextIO

from contextlog.core.log_context import LogContext
from contextlog.core.logger import Logger
from contextlog.core.logger_config import (
    FORMAT_JSON,
    FORMAT_NOP,
    NAME_KEY,
    LoggerConfig,
)
from contextlog.formatters.base_formatter import BaseFormatter, NopFormatter
from contextlog.formatters.json_formatter import JSONFormatter
from contextlog.formatters.logfmt_formatter import LogfmtFormatter
from contextlog.writers.buffer_writer import BufferWriter
from contextlog.writers.console_writer import ConsoleWriter
from contextlog.writers.nop_writer import NopWriter


class LoggerBuilder:
    """Builder pattern for logger construction."""

    def __init__(self, config: Optional[LoggerConfig] = None):
        self._config = config or LoggerConfig()
        self._writer: Any = None
        self._formatter: Optional[BaseFormatter] = None
        self._fields: Dict[str, Any] = {}

    def with_name(self, name: str) -> "LoggerBuilder":
        """Set logger name, rendered as a ``logger`` field on every line."""
        self._config.name = name
        return self

    def with_format(self, fmt: str) -> "LoggerBuilder":
        """
        Set rendering mode.

        Args:
            fmt: ``logfmt`` (alias ``plain``), ``json`` or ``nop``

        Raises:
            ValueError: If fmt is not a known format
        """
        self._config = LoggerConfig(
            name=self._config.name,
            format=fmt,
            caller_depth=self._config.caller_depth,
            timestamps=self._config.timestamps,
            colored_output=self._config.colored_output,
            ensure_ascii=self._config.ensure_ascii,
        )
        return self

    def with_json(self, ensure_ascii: bool = False) -> "LoggerBuilder":
        """Render lines as JSON objects."""
        self._config.ensure_ascii = ensure_ascii
        return self.with_format(FORMAT_JSON)

    def with_caller_depth(self, depth: int) -> "LoggerBuilder":
        """Set how many caller frames each line carries."""
        if depth < 1:
            raise ValueError("caller_depth must be at least 1")
        self._config.caller_depth = depth
        return self

    def with_timestamps(self, enabled: bool = True) -> "LoggerBuilder":
        """Enable/disable the ``ts`` field."""
        self._config.timestamps = enabled
        return self

    def with_console(
        self,
        stream: Optional[TextIO] = None,
        colored: Optional[bool] = None,
    ) -> "LoggerBuilder":
        """
        Write to the console (stdout unless stream is given).

        Args:
            stream: Output stream
            colored: Color lines by level; None keeps the configured value
        """
        self._writer = ConsoleWriter(stream)
        if colored is not None:
            self._config.colored_output = colored
        return self

    def with_buffer(self) -> "LoggerBuilder":
        """Write to an in-memory buffer, reachable as ``logger.writer``."""
        self._writer = BufferWriter()
        return self

    def with_writer(self, writer: Any) -> "LoggerBuilder":
        """
        Use a custom writer.

        Args:
            writer: Object with ``write(line)``; it must serialize
                    concurrent writes itself

        Returns:
            Self for method chaining
        """
        self._writer = writer
        return self

    def with_formatter(self, formatter: BaseFormatter) -> "LoggerBuilder":
        """Use a custom formatter instead of the configured format."""
        self._formatter = formatter
        return self

    def with_fields(self, fields: Mapping[str, Any]) -> "LoggerBuilder":
        """
        Add context carried by every line of the built logger.

        Example:
            logger = (LoggerBuilder()
                .with_fields({"app": "ledger", "version": "v0.1.0"})
                .build())
        """
        self._fields.update(fields)
        return self

    def build(self) -> Logger:
        """Build and return configured logger."""
        config = self._config
        context = LogContext.from_mapping(self._fields)
        if config.name:
            context = LogContext.from_key_values(NAME_KEY, config.name).extend(context)

        if config.format == FORMAT_NOP:
            return Logger(NopWriter(), NopFormatter(), config, context)

        writer = self._writer if self._writer is not None else ConsoleWriter()
        formatter = self._formatter or self._default_formatter()
        return Logger(writer, formatter, config, context)

    def _default_formatter(self) -> BaseFormatter:
        if self._config.format == FORMAT_JSON:
            return JSONFormatter(ensure_ascii=self._config.ensure_ascii)
        return LogfmtFormatter(colored=self._config.colored_output)
