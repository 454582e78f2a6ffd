"""
Constants for the logging system.

Format strings, rule widths, the custom TRACE level and the level-name table
used to resolve configuration values.
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    DEFAULT_FORMAT: str = "[%(asctime)s] [%(levelname).1s] %(message)s"

    # Column at which structured fields start
    DEFAULT_RULE_WIDTH: int = 70
    MICRO_RULE_WIDTH: int = 74

    CUSTOM_LEVELS: dict[str, int] = {"TRACE": 5}

    LEVEL_NAMES: dict[str, int | bool] = {
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "trace": 5,
        "false": False,  # disables all logging
    }

    RESET: str = "\x1b[0m"

    GRAY_BASE: int = 232
    GRAY_MAX_LEVELS: int = 24
