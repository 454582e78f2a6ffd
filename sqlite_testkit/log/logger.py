"""
Logger class for the logging system.

Logger extends logging.Logger with structured extra fields that are kept
together on the record (so the formatter can render them as [key:value]
pairs), a TRACE level, and "view" loggers that reuse their root's handlers.
"""

import logging
import sys
from typing import Any

from .config import LogConfig
from .constants import LogConstants

EXTRA_ATTR = "__testkit__extra"


class Logger(logging.Logger):
    """
    Enhanced logger with structured extra fields.

    Extends the standard Python logger with:
    - Pre-populated extra fields merged into every record
    - A custom trace() level below DEBUG
    - Handler delegation for derived loggers (see LoggerFactory.derive)
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | None = None,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name
            config: Logger configuration; a default INFO config if None
            extra: Pre-populated extra fields to include in all log records
        """
        if config is None:
            config = LogConfig.from_params("info", colors=False)

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = extra or {}
        self._root_logger: Logger | None = None  # set for derived "view" loggers

    @property
    def config(self) -> LogConfig:
        """Get logger configuration."""
        return self._config

    @property
    def disabled(self) -> bool:
        """Check if logging is disabled."""
        return self._logging_disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self._logging_disabled = value

    def get_level(self) -> int | bool:
        """Get configured log level."""
        return self._config.level

    def makeRecord(
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record, attaching merged extra fields for the formatter."""
        merged = dict(self._extra)
        if extra:
            merged.update(extra)
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func, merged, sinfo
        )
        setattr(record, EXTRA_ATTR, merged)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log a TRACE level message.

        Args:
            msg: Log message
            *args: Message format arguments
            **kwargs: Additional keyword arguments including 'extra'
        """
        if self._logging_disabled:
            return
        trace_level = LogConstants.CUSTOM_LEVELS["TRACE"]
        if self.isEnabledFor(trace_level):
            self._log(trace_level, msg, args, **kwargs)

    def _log(self, level: int, msg: object, args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        if self._logging_disabled:
            return

        try:
            super()._log(level, msg, args, **kwargs)
        except (TypeError, ValueError) as e:
            # Surface format bugs without breaking the caller
            sys.stderr.write(
                f"LOG_FORMAT_ERROR [{self.name}]: {e.__class__.__name__}: {e} "
                f"| msg={msg!r} args={args!r}\n"
            )

    def callHandlers(self, record: logging.LogRecord) -> None:
        """
        Pass a record to all relevant handlers.

        Derived loggers have no handlers of their own and use the root's.
        """
        if self._root_logger is not None:
            for handler in self._root_logger.handlers:
                if record.levelno >= handler.level:
                    handler.handle(record)
        else:
            super().callHandlers(record)
