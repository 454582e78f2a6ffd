"""
Factory for creating and configuring loggers.

Loggers are named with "/"-separated paths. A root logger owns a console
handler; derived loggers are lightweight views that share it.
"""

import logging
import sys
from typing import Any, cast

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(config: LogConfig, stream: Any = None) -> Logger:
        """
        Create a root logger with the specified configuration.

        Args:
            config: Logger configuration
            stream: Output stream for the console handler (default: stdout)

        Returns:
            Configured root logger

        Example:
            >>> config = LogConfig.from_params(level="info", colors=False)
            >>> lg = LoggerFactory.create_root(config)
            >>> lg.info("started")
            [12:34:56,789] [I] started                              [1234] [/]
        """
        return LoggerFactory.create("/", config, stream=stream)

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        extra: dict[str, Any] | None = None,
        stream: Any = None,
    ) -> Logger:
        """
        Create a logger with its own console handler.

        Returns the existing logger if one is already registered under name.

        Args:
            name: Logger name
            config: Logger configuration
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream for the console handler (default: stdout)

        Returns:
            Configured logger instance
        """
        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        lg = Logger(name, config, extra)
        if config.level is not False:
            lg.setLevel(config.level)

        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(LogFormatter(config))
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        logging.root.manager.loggerDict[name] = lg
        lg.trace("created logger", extra={"level": logging.getLevelName(lg.level)})
        return lg

    @staticmethod
    def _check_existing_logger(name: str) -> Logger | None:
        """Return the registered logger for name, if it is one of ours."""
        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger):
            return cast(Logger, existing)
        return None

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a "view" logger that delegates to the root's handlers.

        Examples:
            >>> derived = LoggerFactory.derive(root, "sqlite3")
            >>> derived.name
            '/sqlite3'

            >>> derived = LoggerFactory.derive(root, ["db", "fixtures"])
            >>> derived.name
            '/db/fixtures'

        Args:
            parent: Parent logger instance
            tags: Single tag string or list of tags forming the hierarchy

        Returns:
            Derived logger with the parent's level and extra fields
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        root = parent._root_logger if parent._root_logger else parent
        lg = Logger(name, parent.config, dict(parent._extra))
        if parent.config.level is not False:
            lg.setLevel(parent.level)
        lg._root_logger = root
        lg.parent = parent
        lg.propagate = False

        logging.root.manager.loggerDict[name] = lg
        lg.trace("derived logger", extra={"root": root.name})
        return lg
