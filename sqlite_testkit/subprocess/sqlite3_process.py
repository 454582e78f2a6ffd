"""
Interactive sqlite3 shell session.

Spawns the sqlite3 command-line shell against a database file so tests can
exercise SQLite's multi-process locking, which differs from several
connections held inside one process.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import ExecError, FixtureSetupError
from .config import SessionConfig
from .session import InteractiveSession

if TYPE_CHECKING:
    from ..log import Logger
    from ..time import Clock

WAL_MODE_SQL = "PRAGMA journal_mode=WAL;"
DISABLE_CHECKPOINT_SQL = "PRAGMA wal_autocheckpoint=0;"
CREATE_TEST_TABLE_SQL = "CREATE TABLE test (id INTEGER PRIMARY KEY, value TEXT);"

# Rows written by create_dummy_data(), numbered 1..DUMMY_ROW_COUNT
DUMMY_ROW_COUNT = 999


def dummy_insert_sql(number: int) -> str:
    """Insert statement for dummy row `number`."""
    return f"INSERT INTO test (value) VALUES ('Hello, World! {number}');"


class Sqlite3Process(InteractiveSession):
    """
    Wrapper for controlling an interactive sqlite3 process.

    Example:
        with Sqlite3Process(tmp_path / "test.db") as proc:
            proc.enable_wal_mode()
            assert "2" in proc.execute("SELECT 1 + 1;")

    The fixture helpers (enable_wal_mode, disable_wal_checkpointing,
    create_dummy_data) fail fast: any command error raises
    FixtureSetupError, since a half-built fixture makes the test meaningless.
    """

    def __init__(
        self,
        db_path: str | Path,
        lg: Logger | None = None,
        config: SessionConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(db_path, lg=lg, config=config, clock=clock)

    @property
    def db_path(self) -> Path:
        return self.path

    def _setup(self, sql: str) -> str:
        try:
            return self.execute(sql)
        except ExecError as e:
            raise FixtureSetupError(
                f"fixture setup failed: {sql}", path=self.path
            ) from e

    def enable_wal_mode(self) -> None:
        """Switch the database to WAL (write-ahead logging) journal mode."""
        self._setup(WAL_MODE_SQL)

    def disable_wal_checkpointing(self) -> None:
        """Turn off automatic WAL checkpoints so tests control when they happen."""
        self._setup(DISABLE_CHECKPOINT_SQL)

    def create_dummy_data(self) -> None:
        """
        Create the `test` table and insert DUMMY_ROW_COUNT rows.

        Row n holds 'Hello, World! n'. The first failing statement aborts the
        batch.
        """
        self._setup(CREATE_TEST_TABLE_SQL)
        for number in range(1, DUMMY_ROW_COUNT + 1):
            self._setup(dummy_insert_sql(number))
        self._lg.debug("created dummy data", extra={"rows": DUMMY_ROW_COUNT})
