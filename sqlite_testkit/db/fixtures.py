"""
Fixture helpers for SQLite tests.

Stateless functions that, given an open SQLAlchemy connection, create a
`notes` table filled with seeded pseudo-random Latin text, change the journal
mode, and insert, update or read single rows. Every write is committed before
the function returns so that a separate sqlite3 process sees it.

Example:
    db = SQLite.for_path(lg, tmp_path / "test.db")
    with db.connect() as conn:
        init_test_db(conn, "main", 42, 100, 10)
        set_journal_mode(conn, "WAL", "main")
        new_id = insert_test_db(conn, "main", 15)   # 101
        update_test_db(conn, "main", 1, 20)
        text = read_row(conn, "main", 1)
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from sqlalchemy import text

from ..exceptions import DatabaseError

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

logger = logging.getLogger(__name__)

JOURNAL_MODES = frozenset({"delete", "truncate", "persist", "memory", "wal", "off"})

# Vocabulary for generated notes
WORDS: tuple[str, ...] = (
    "Cras", "Fusce", "Lorem", "Maecenas", "Nunc", "Orci", "Pellentesque", "Ut",
    "adipiscing", "amet", "at", "bibendum", "commodo", "condimentum",
    "consectetur", "dapibus", "dis", "dolor", "egestas", "elit", "eros", "et",
    "eu", "fringilla", "iaculis", "id", "in", "ipsum", "lacinia", "lorem",
    "magnis", "malesuada", "mi", "montes", "nascetur", "natoque", "nec", "nisi",
    "nulla", "parturient", "pellentesque", "penatibus", "placerat", "purus",
    "quam", "ridiculus", "risus", "sagittis", "scelerisque", "sed", "sem", "sit",
    "tincidunt", "tortor", "ultrices", "varius", "vel", "venenatis",
)  # fmt: skip

_rng = random.Random()


def seed(value: int) -> None:
    """Reseed the generator used for note text."""
    _rng.seed(value)


def _check_schema(schema: str) -> str:
    if not schema.isidentifier():
        raise DatabaseError("Invalid schema name", schema=schema)
    return schema


def create_note(word_count: int) -> str:
    """
    Create a random note.

    Args:
        word_count: Exclusive upper bound on the number of words; must be > 0

    Returns:
        Between 0 and word_count - 1 words, each followed by a single space
    """
    count = _rng.randrange(word_count)
    return "".join(_rng.choice(WORDS) + " " for _ in range(count))


def init_test_db(
    conn: Connection,
    schema: str,
    seed_value: int,
    row_count: int,
    note_word_count: int,
    lg: Any = None,
) -> None:
    """
    Create the `notes` table in schema and fill it with random notes.

    Args:
        conn: Open database connection
        schema: Schema name ("main" for the default schema)
        seed_value: Random seed; equal seeds produce equal contents
        row_count: Number of rows to insert
        note_word_count: Exclusive upper bound on words per note
        lg: Logger for the row count report (module logger if None)
    """
    seed(seed_value)
    schema = _check_schema(schema)

    conn.execute(
        text(
            f"CREATE TABLE {schema}.notes "
            "(id INTEGER PRIMARY KEY, text TEXT NOT NULL)"
        )
    )

    insert = text(f"INSERT INTO {schema}.notes (text) VALUES (:text)")
    for _ in range(row_count):
        conn.execute(insert, {"text": create_note(note_word_count)})
    conn.commit()

    count = conn.execute(text(f"SELECT COUNT(*) FROM {schema}.notes")).scalar_one()
    (lg or logger).debug("initialized test db", extra={"schema": schema, "rows": count})


def set_journal_mode(conn: Connection, mode: str, schema: str) -> None:
    """
    Set the journal mode of schema.

    Args:
        conn: Open database connection
        mode: One of DELETE, TRUNCATE, PERSIST, MEMORY, WAL, OFF (any case)
        schema: Schema name ("main" for the default schema)

    Raises:
        DatabaseError: Unknown mode, or SQLite reported a different mode
            afterwards (e.g. WAL on an in-memory database)
    """
    schema = _check_schema(schema)
    mode = mode.lower()
    if mode not in JOURNAL_MODES:
        raise DatabaseError("Unknown journal mode", mode=mode)

    conn.commit()
    result = conn.execute(text(f"PRAGMA {schema}.journal_mode = {mode}")).scalar()
    conn.commit()

    journal_mode = str(result).lower()
    if journal_mode != mode:
        raise DatabaseError(
            f"Could not set journal mode for {schema} to {mode}", actual=journal_mode
        )


def update_test_db(conn: Connection, schema: str, row_id: int, word_count: int) -> None:
    """Replace the text of row row_id with a new random note."""
    schema = _check_schema(schema)
    conn.execute(
        text(f"UPDATE {schema}.notes SET text = :text WHERE id = :id"),
        {"text": create_note(word_count), "id": row_id},
    )
    conn.commit()


def insert_test_db(conn: Connection, schema: str, word_count: int) -> int:
    """
    Insert a new random note.

    Returns:
        Row id of the inserted row
    """
    schema = _check_schema(schema)
    result = conn.execute(
        text(f"INSERT INTO {schema}.notes (text) VALUES (:text)"),
        {"text": create_note(word_count)},
    )
    row_id = result.lastrowid
    conn.commit()
    return int(row_id)


def read_row(conn: Connection, schema: str, row_id: int) -> str:
    """
    Read the text of row row_id.

    Raises:
        DatabaseError: The row does not exist
    """
    schema = _check_schema(schema)
    value = conn.execute(
        text(f"SELECT text FROM {schema}.notes WHERE id = :id"), {"id": row_id}
    ).scalar_one_or_none()
    if value is None:
        raise DatabaseError("Row not found", schema=schema, row_id=row_id)
    return str(value)
