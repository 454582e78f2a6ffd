"""
Structured console logging.

Extends Python's standard logging with:
- A custom TRACE level below DEBUG
- Structured extra fields rendered as [key:value] pairs
- Optional ANSI colours and microsecond timestamps
- Derived "view" loggers that share their root's handlers

Log Level Control:
- Standard levels: debug, info, warning, error
- Custom level: trace
- Disable logging completely: False or "false"
"""

import logging

from .config import LogConfig
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .logger import Logger

logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE"], "TRACE")

__all__ = [
    "Logger",
    "LoggerFactory",
    "LogConfig",
    "LogConstants",
    "LogError",
    "InvalidLogLevelError",
]
