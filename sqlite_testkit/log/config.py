"""
Configuration for the logging system.

LogConfig is immutable so a logger's settings cannot change underneath the
handlers that were built from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable logger configuration.

    Attributes:
        level: Numeric level, or False to disable logging entirely
        micros: Show sub-millisecond precision in timestamps
        colors: Emit ANSI colours
    """

    level: int | bool = logging.INFO
    micros: bool = False
    colors: bool = True

    @staticmethod
    def _resolve_level(level: str | int | bool) -> int | bool:
        """Resolve level parameter to int or False."""
        from .constants import LogConstants
        from .exceptions import InvalidLogLevelError

        if isinstance(level, bool):
            return False if not level else logging.INFO
        elif isinstance(level, str):
            if level.isnumeric():
                return int(level)
            elif level.lower() in LogConstants.LEVEL_NAMES:
                return LogConstants.LEVEL_NAMES[level.lower()]
            else:
                raise InvalidLogLevelError(level)
        return level

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        micros: bool = False,
        colors: bool = True,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (string name, numeric value, or False to disable logging)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output

        Returns:
            LogConfig instance
        """
        return cls(level=cls._resolve_level(level), micros=micros, colors=colors)

    @classmethod
    def from_config(cls, config_dict: dict, section: str = "logging") -> LogConfig:
        """
        Create LogConfig from a configuration dictionary.

        Args:
            config_dict: Configuration dictionary (e.g., Config.dict())
            section: Dotted path of the logging section

        Returns:
            LogConfig instance

        Example:
            config = Config("etc/testkit.yaml")
            log_config = LogConfig.from_config(config.dict())
        """
        current: object = config_dict
        for part in section.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                current = {}
                break
        if not isinstance(current, dict):
            current = {}

        level = current.get("level", "info")
        if level is None:
            level = False
        micros = current.get("microseconds", current.get("micros", False))
        colors = current.get("colors", True)
        if isinstance(colors, dict):
            colors = colors.get("enabled", True)

        return cls.from_params(level=level, micros=micros, colors=colors)
