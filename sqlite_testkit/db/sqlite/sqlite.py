"""
SQLite engine wrapper.

Provides a SQLAlchemy engine for a file-based SQLite database, used to hold
the in-process side of multi-process tests while a Sqlite3Process holds the
other side.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import sqlalchemy

from ...log import Logger, LoggerFactory

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


def _validate_sqlite_config(cfg: Any) -> None:
    """Validate SQLite configuration."""
    if cfg is None:
        raise ValueError("Configuration cannot be None")

    if not hasattr(cfg, "url") or not cfg.url:
        raise ValueError("Configuration missing required 'url' field")

    url = cfg.url
    if not url.startswith("sqlite"):
        raise ValueError(f"Invalid SQLite URL: {url}")


def _get_engine_kwargs(cfg: Any) -> dict[str, Any]:
    """Get engine creation kwargs from config."""
    kwargs: dict[str, Any] = {}

    if hasattr(cfg, "check_same_thread"):
        kwargs["connect_args"] = {"check_same_thread": cfg.check_same_thread}
    else:
        kwargs["connect_args"] = {"check_same_thread": False}

    # Seconds pysqlite waits on a locked database before raising
    if hasattr(cfg, "timeout"):
        kwargs["connect_args"]["timeout"] = cfg.timeout

    if getattr(cfg, "echo", False):
        kwargs["echo"] = True

    return kwargs


class _PathConfig:
    """Config object for a database file."""

    def __init__(self, path: str | Path) -> None:
        self.url = f"sqlite:///{Path(path)}"


class SQLite:
    """
    SQLite database interface.

    Example:
        >>> db = SQLite.for_path(lg, tmp_path / "test.db")
        >>> with db.connect() as conn:
        ...     init_test_db(conn, "main", 42, 100, 10)
        >>> db.dispose()
    """

    def __init__(self, lg: Any, cfg: Any) -> None:
        """
        Initialize the SQLite database interface.

        Args:
            lg: Logger instance for database operations
            cfg: Database configuration object with 'url' field
        """
        if lg is None:
            raise ValueError("Logger cannot be None")

        _validate_sqlite_config(cfg)

        self._cfg = cfg
        self._lg = LoggerFactory.derive(lg, "sqlite") if isinstance(lg, Logger) else lg
        self._engine: Engine = sqlalchemy.create_engine(
            cfg.url, **_get_engine_kwargs(cfg)
        )

        self._lg.debug("initialized", extra={"url": self.url})

    @classmethod
    def for_path(cls, lg: Any, path: str | Path) -> SQLite:
        """Create an interface for the database file at path."""
        return cls(lg, _PathConfig(path))

    @property
    def cfg(self) -> Any:
        """Get the database configuration."""
        return self._cfg

    @property
    def url(self) -> str:
        """Get the database URL."""
        return str(self._engine.url)

    @property
    def engine(self) -> Engine:
        """Get the SQLAlchemy engine."""
        return self._engine

    def connect(self) -> Connection:
        """
        Open a connection to the database.

        Returns:
            SQLAlchemy connection; use it as a context manager to close it
        """
        return self._engine.connect()

    def dispose(self) -> None:
        """Dispose of the engine and close all pooled connections."""
        self._engine.dispose()
        self._lg.debug("disposed engine")
