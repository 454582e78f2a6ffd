"""
Log formatter for console output.

Renders records as:

    [12:34:56,789] [W] sqlite3 exited with error      [status:1] [stderr:...] [1234] [/sqlite3]

with structured extra fields aligned after the message and optional ANSI
colours per level.
"""

import logging
import re
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants
from .logger import EXTRA_ATTR

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visual_len(text: str) -> int:
    """Calculate visual width of text, excluding ANSI escape codes."""
    if "\x1b" not in text:
        return len(text)
    return len(_ANSI_PATTERN.sub("", text))


def _escape(value: Any) -> str:
    """Render a value so it survives %-style formatting."""
    if isinstance(value, Exception):
        value = value.__class__.__name__ + ": " + str(value)
    return str(value).replace("%", "%%")


class PreFormatter(logging.Formatter):
    """Standard formatter with optional sub-millisecond timestamps."""

    # Time of day only: "12:34:56,789"
    default_time_format = "%H:%M:%S"

    def __init__(self, fmt: str, micros: bool) -> None:
        self._micros = micros
        super().__init__(fmt)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        s = super().formatTime(record)
        if self._micros:
            micros = int((record.created % 1) * 1000000) % 1000
            s += f".{micros:03d}"
        return s


class LogFormatter(logging.Formatter):
    """
    Console formatter with structured field rendering.

    Provides:
    - ANSI colour per log level (when config.colors is set)
    - [key:value] rendering of the record's extra fields
    - Process id and logger name trailer
    """

    def __init__(self, config: LogConfig):
        """
        Initialize the log formatter.

        Args:
            config: Logger configuration
        """
        super().__init__()
        self._config = config
        self._pre_formatter = PreFormatter(LogConstants.DEFAULT_FORMAT, config.micros)

    def format(self, record: logging.LogRecord) -> str:
        width = self._calculate_width(record)
        if self._config.colors:
            fmt = self._format_colored(record, width)
        else:
            fmt = self._format_plain(record, width)

        self._pre_formatter._fmt = fmt
        self._pre_formatter._style._fmt = fmt
        return self._pre_formatter.format(record)

    def _calculate_width(self, record: logging.LogRecord) -> int:
        """Display width of "[timestamp] [L] message"."""
        timestamp_len = 16 if self._config.micros else 12
        return 1 + timestamp_len + 3 + 1 + 2 + _visual_len(record.getMessage())

    def _padding(self, width: int) -> str:
        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        return " " * max(1, rule - width)

    @staticmethod
    def _extra(record: logging.LogRecord) -> dict[str, Any]:
        return getattr(record, EXTRA_ATTR, None) or {}

    def _format_plain(self, record: logging.LogRecord, width: int) -> str:
        fmt = LogConstants.DEFAULT_FORMAT + self._padding(width)
        extra = self._extra(record)
        if extra:
            fmt += " ".join(f"[{k}:{_escape(extra[k])}]" for k in sorted(extra)) + " "
        return fmt + "[%(process)d] [%(name)s]"

    def _format_colored(self, record: logging.LogRecord, width: int) -> str:
        col = ColorManager.get_color_for_level(record.levelno)
        bold = ColorManager.create_bold_color(col)
        col += "m"
        reset = ColorManager.RESET

        fmt = col + "[%(asctime)s] [" + bold + "%(levelname).1s" + reset + col + "] "
        fmt += bold + "%(message)s" + reset + col + self._padding(width)

        extra = self._extra(record)
        for k in sorted(extra):
            fmt += f"{k}[{bold}{_escape(extra[k])}{reset}{col}] "

        gray = ColorManager.create_gray_level(9) + "m"
        fmt += reset + gray + "[%(process)d] [%(name)s]" + reset
        return fmt
