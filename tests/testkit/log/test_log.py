"""
Tests for the structured logging package.
"""

import logging
from io import StringIO

import pytest

from sqlite_testkit.log import (
    InvalidLogLevelError,
    LogConfig,
    LogConstants,
    Logger,
    LoggerFactory,
)
from sqlite_testkit.log.colors import ColorManager
from sqlite_testkit.log.formatters import LogFormatter


@pytest.mark.unit
class TestLogConfig:
    """Test LogConfig construction."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("trace", 5),
            ("30", 30),
            (logging.ERROR, logging.ERROR),
            (False, False),
            ("false", False),
            (True, logging.INFO),
        ],
    )
    def test_from_params_levels(self, level, expected):
        assert LogConfig.from_params(level).level == expected

    def test_invalid_level(self):
        with pytest.raises(InvalidLogLevelError, match="verbose"):
            LogConfig.from_params("verbose")

    def test_from_config(self):
        """Test reading the logging section of a config dictionary."""
        config = LogConfig.from_config(
            {"logging": {"level": "debug", "micros": True, "colors": False}}
        )
        assert config == LogConfig(level=logging.DEBUG, micros=True, colors=False)

    def test_from_config_defaults(self):
        assert LogConfig.from_config({}) == LogConfig(level=logging.INFO)

    def test_from_config_null_level_disables(self):
        assert LogConfig.from_config({"logging": {"level": None}}).level is False

    def test_from_config_colors_section(self):
        config = LogConfig.from_config({"logging": {"colors": {"enabled": False}}})
        assert config.colors is False

    def test_frozen(self):
        with pytest.raises(AttributeError):
            LogConfig().level = logging.DEBUG  # type: ignore[misc]


@pytest.mark.unit
class TestLoggerFactory:
    """Test creating and deriving loggers."""

    def test_create_root(self, lg, log_stream):
        """Test the root logger writes plain lines to its stream."""
        lg.info("hello")

        line = log_stream.getvalue().strip()
        assert "[I] hello" in line
        assert line.endswith("[/]")

    def test_create_returns_existing(self):
        config = LogConfig.from_params("info", colors=False)
        first = LoggerFactory.create("/shared", config, stream=StringIO())
        second = LoggerFactory.create("/shared", config, stream=StringIO())
        assert first is second

    def test_derive_name(self, lg):
        assert LoggerFactory.derive(lg, "sqlite3").name == "/sqlite3"
        assert LoggerFactory.derive(lg, ["db", "fixtures"]).name == "/db/fixtures"

    def test_derive_from_derived(self, lg):
        child = LoggerFactory.derive(lg, "db")
        assert LoggerFactory.derive(child, "sqlite").name == "/db/sqlite"

    def test_derived_shares_root_handlers(self, lg, log_stream):
        """Test a derived logger writes through the root's handler."""
        child = LoggerFactory.derive(lg, "sqlite3")
        assert child.handlers == []

        child.debug("spawned", extra={"pid": 12})

        line = log_stream.getvalue().strip()
        assert "spawned" in line
        assert "[pid:12]" in line
        assert line.endswith("[/sqlite3]")

    def test_derived_inherits_extra(self, log_stream):
        config = LogConfig.from_params("debug", colors=False)
        root = LoggerFactory.create("/", config, extra={"run": 7}, stream=log_stream)

        LoggerFactory.derive(root, "child").info("x")

        assert "[run:7]" in log_stream.getvalue()

    def test_derive_returns_existing(self, lg):
        assert LoggerFactory.derive(lg, "a") is LoggerFactory.derive(lg, "a")


@pytest.mark.unit
class TestLogger:
    """Test Logger behaviour."""

    def test_extra_fields_sorted(self, lg, log_stream):
        lg.warning("process exited with error", extra={"status": 1, "stderr": "boom"})
        assert "[status:1] [stderr:boom]" in log_stream.getvalue()

    def test_exception_extra_rendered(self, lg, log_stream):
        lg.error("failed", extra={"error": OSError("bad handle")})
        assert "[error:OSError: bad handle]" in log_stream.getvalue()

    def test_percent_in_extra(self, lg, log_stream):
        lg.info("x", extra={"sql": "LIKE '%a%'"})
        assert "[sql:LIKE '%a%']" in log_stream.getvalue()

    def test_trace_filtered_at_debug(self, lg, log_stream):
        lg.trace("hidden")
        assert "hidden" not in log_stream.getvalue()

    def test_trace_enabled(self):
        stream = StringIO()
        lg = LoggerFactory.create_root(
            LogConfig.from_params("trace", colors=False), stream=stream
        )
        lg.trace("visible")
        assert "[T] visible" in stream.getvalue()

    def test_disabled_logger(self):
        stream = StringIO()
        lg = LoggerFactory.create_root(LogConfig.from_params(False), stream=stream)
        lg.error("nothing")
        assert lg.disabled
        assert stream.getvalue() == ""

    def test_default_config(self):
        lg = Logger("/plain")
        assert lg.config.level == logging.INFO
        assert lg.get_level() == logging.INFO


@pytest.mark.unit
class TestFormatting:
    """Test the console formatter."""

    def _record(self, msg="message", level=logging.INFO, extra=None):
        lg = Logger("/fmt", LogConfig.from_params("debug", colors=False))
        return lg.makeRecord("/fmt", level, "f.py", 1, msg, (), None, extra=extra)

    def test_plain_layout(self):
        formatter = LogFormatter(LogConfig(colors=False))
        line = formatter.format(self._record(extra={"rows": 3}))

        assert line.startswith("[")
        assert "] [I] message" in line
        assert "[rows:3]" in line
        assert line.endswith("[/fmt]")

    def test_fields_aligned_at_rule(self):
        formatter = LogFormatter(LogConfig(colors=False))
        line = formatter.format(self._record(extra={"rows": 3}))
        assert line.index("[rows:3]") == LogConstants.DEFAULT_RULE_WIDTH

    def test_colored_layout(self):
        formatter = LogFormatter(LogConfig(colors=True))
        line = formatter.format(self._record(level=logging.WARNING))

        assert ColorManager.YELLOW in line
        assert line.endswith(LogConstants.RESET)

    def test_micros(self):
        formatter = LogFormatter(LogConfig(colors=False, micros=True))
        line = formatter.format(self._record())
        timestamp = line[1 : line.index("]")]
        assert len(timestamp) == 16


@pytest.mark.unit
class TestColorManager:
    """Test colour selection."""

    def test_known_levels(self):
        assert ColorManager.get_color_for_level(logging.ERROR) == ColorManager.RED
        assert ColorManager.get_color_for_level(5) == "\x1b[38;5;240"

    def test_unknown_level(self):
        assert ColorManager.get_color_for_level(17) == ColorManager.DEFAULT

    def test_gray_clamped(self):
        assert ColorManager.create_gray_level(100) == "\x1b[38;5;255"
        assert ColorManager.create_gray_level(-1) == "\x1b[38;5;232"
