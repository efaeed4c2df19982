"""Tests for formatters, writers and configuration"""

import io
import json

import pytest

from contextlog import LogEntry, LoggerBuilder, LoggerConfig
from contextlog.core.caller import Frame
from contextlog.formatters import JSONFormatter, LogfmtFormatter, NopFormatter
from contextlog.formatters.logfmt_formatter import clean_key, quote_value
from contextlog.writers import BufferWriter, ConsoleWriter, NopWriter


def make_entry(**kwargs):
    defaults = dict(
        message="hello world",
        fields={"user": "42"},
        callers=[Frame("/src/app.py", 12, "main")],
        timestamp=None,
    )
    defaults.update(kwargs)
    return LogEntry(**defaults)


class TestLogEntry:
    """Test log entry flattening."""

    def test_default_level(self):
        assert make_entry().level == "info"

    def test_pairs_order(self):
        entry = make_entry(fields={"level": "error", "user": "42"}, error="boom")
        keys = [k for k, _ in entry.to_pairs()]
        assert keys == ["level", "user", "caller_0", "error", "msg"]

    def test_timestamp_included(self):
        entry = LogEntry(message="m")
        assert entry.to_dict()["ts"].endswith("Z")


class TestLogfmtFormatter:
    """Test logfmt rendering."""

    def test_format(self):
        line = LogfmtFormatter().format(make_entry())
        assert line == 'level=info user=42 caller_0=app.py:12 msg="hello world"'

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("plain", "plain"),
            ("", '""'),
            ("two words", '"two words"'),
            ("a=b", '"a=b"'),
            ('say "hi"', '"say \\"hi\\""'),
            ("line\nbreak", '"line\\nbreak"'),
        ],
    )
    def test_quote_value(self, value, expected):
        assert quote_value(value) == expected

    def test_clean_key(self):
        assert clean_key("bad key=") == "bad_key_"
        assert clean_key("") == "_"

    def test_colored(self):
        line = LogfmtFormatter(colored=True).format(make_entry(fields={"level": "error"}))
        assert line.startswith("\033[31m")
        assert line.endswith("\033[0m")

    def test_colored_unknown_level(self):
        line = LogfmtFormatter(colored=True).format(make_entry(fields={"level": "custom"}))
        assert line.startswith("level=custom")


class TestJSONFormatter:
    """Test JSON rendering."""

    def test_format(self):
        record = json.loads(JSONFormatter().format(make_entry(error="boom")))
        assert record == {
            "level": "info",
            "user": "42",
            "caller_0": "app.py:12",
            "error": "boom",
            "msg": "hello world",
        }

    def test_keys_follow_field_order(self):
        line = JSONFormatter().format(make_entry(fields={"zone": "eu", "account": "7"}))
        assert list(json.loads(line)) == ["level", "zone", "account", "caller_0", "msg"]

    def test_ensure_ascii(self):
        line = JSONFormatter(ensure_ascii=True).format(make_entry(message="café"))
        assert "\\u00e9" in line

    def test_nop_formatter(self):
        assert NopFormatter().format(make_entry()) == ""


class TestWriters:
    """Test sinks."""

    def test_buffer_writer(self):
        writer = BufferWriter()
        writer.write("one")
        writer.write("two")
        assert writer.lines() == ["one", "two"]
        assert writer.stats["written"] == 2

        writer.clear()
        assert writer.getvalue() == ""

    def test_console_writers_share_stream_lock(self):
        stream = io.StringIO()
        first, second = ConsoleWriter(stream), ConsoleWriter(stream)
        assert first._lock is second._lock
        assert ConsoleWriter(io.StringIO())._lock is not first._lock

        first.write("one")
        second.write("two")
        assert stream.getvalue() == "one\ntwo\n"

    def test_nop_writer_disabled(self):
        writer = NopWriter()
        assert writer.enabled is False
        writer.write("ignored")
        assert writer.stats["written"] == 0


class TestLoggerConfig:
    """Test logger configuration."""

    def test_default_config(self):
        config = LoggerConfig.default()
        assert config.name is None
        assert config.format == "logfmt"
        assert config.caller_depth == 2
        assert config.timestamps is True

    def test_format_aliases(self):
        assert LoggerConfig(format="plain").format == "logfmt"
        assert LoggerConfig(format="JSON").format == "json"
        assert LoggerConfig(format="none").format == "nop"

    def test_invalid_format(self):
        with pytest.raises(ValueError):
            LoggerConfig(format="xml")

    def test_invalid_caller_depth(self):
        with pytest.raises(ValueError):
            LoggerConfig(caller_depth=0)

    def test_from_env(self):
        config = LoggerConfig.from_env({
            "LOG_FORMAT": "json",
            "LOG_CALLER_DEPTH": "3",
            "LOG_TIMESTAMPS": "false",
            "LOG_COLOR": "yes",
        })
        assert config.format == "json"
        assert config.caller_depth == 3
        assert config.timestamps is False
        assert config.name is None
        assert config.colored_output is True

    def test_from_env_name(self):
        assert LoggerConfig.from_env({"LOG_NAME": " ledger "}).name == "ledger"

    def test_from_env_defaults(self):
        config = LoggerConfig.from_env({})
        assert config.format == "logfmt"
        assert config.caller_depth == 2

    @pytest.mark.parametrize(
        "environ",
        [
            {"LOG_CALLER_DEPTH": "many"},
            {"LOG_CALLER_DEPTH": "0"},
            {"LOG_TIMESTAMPS": "maybe"},
        ],
    )
    def test_from_env_invalid(self, environ):
        with pytest.raises(ValueError):
            LoggerConfig.from_env(environ)


class TestLoggerBuilder:
    """Test builder pattern."""

    def test_builder_pattern(self):
        logger = (LoggerBuilder()
            .with_name("builder_test")
            .with_timestamps(False)
            .with_fields({"app": "ledger"})
            .with_buffer()
            .build())

        logger.log("started")
        assert logger.writer.getvalue().startswith("level=info logger=builder_test app=ledger ")

    def test_builder_without_name(self):
        logger = LoggerBuilder().with_timestamps(False).with_buffer().build()
        logger.log("started")
        assert "logger=" not in logger.writer.getvalue()

    def test_builder_name_in_json(self):
        logger = LoggerBuilder().with_name("ledger").with_json().with_buffer().build()
        logger.with_key_value("logger", "override").log("started")
        assert json.loads(logger.writer.getvalue())["logger"] == "override"

    def test_builder_json(self):
        logger = LoggerBuilder().with_json().with_buffer().build()
        logger.log("started")
        assert json.loads(logger.writer.getvalue())["msg"] == "started"

    def test_builder_nop(self):
        logger = LoggerBuilder().with_format("nop").with_buffer().build()
        logger.log("dropped")
        assert isinstance(logger.writer, NopWriter)

    def test_builder_invalid_depth(self):
        with pytest.raises(ValueError):
            LoggerBuilder().with_caller_depth(0)
