"""
In-process database helpers: a SQLAlchemy engine wrapper for SQLite files
and fixture functions that fill and mutate a `notes` table.
"""

from .fixtures import (
    JOURNAL_MODES,
    WORDS,
    create_note,
    init_test_db,
    insert_test_db,
    read_row,
    seed,
    set_journal_mode,
    update_test_db,
)
from .sqlite import SQLite

__all__ = [
    "SQLite",
    "WORDS",
    "JOURNAL_MODES",
    "seed",
    "create_note",
    "init_test_db",
    "set_journal_mode",
    "update_test_db",
    "insert_test_db",
    "read_row",
]
