"""
sqlite-testkit: drive the sqlite3 shell as a separate process from tests.

Provides:
- Sqlite3Process / InteractiveSession: marker-framed request/response over
  the pipes of an interactive process, with bounded, escalating shutdown
- Fixture helpers for the in-process side of multi-process tests
- Injectable clocks, YAML configuration and structured logging
"""

from importlib.metadata import PackageNotFoundError, version

from .config import Config, load_config
from .exceptions import (
    ConfigError,
    DatabaseError,
    ExecError,
    FixtureSetupError,
    IncompleteOutputError,
    SessionError,
    ShutdownHangError,
    SpawnError,
    TestkitError,
)
from .subprocess import InteractiveSession, SessionConfig, SessionState, Sqlite3Process
from .time import Clock, ManualClock, SystemClock, is_timed_out

try:
    __version__ = version("sqlite-testkit")
except PackageNotFoundError:
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    # Sessions
    "InteractiveSession",
    "Sqlite3Process",
    "SessionConfig",
    "SessionState",
    # Time
    "Clock",
    "SystemClock",
    "ManualClock",
    "is_timed_out",
    # Config
    "Config",
    "load_config",
    # Exceptions
    "TestkitError",
    "ConfigError",
    "DatabaseError",
    "SessionError",
    "SpawnError",
    "ExecError",
    "IncompleteOutputError",
    "FixtureSetupError",
    "ShutdownHangError",
]
