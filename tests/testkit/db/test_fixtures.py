"""
Tests for the in-process fixture helpers.

Tests run against a real SQLite file through SQLAlchemy.
"""

import logging

import pytest
from sqlalchemy import text

from sqlite_testkit.db import (
    WORDS,
    SQLite,
    create_note,
    init_test_db,
    insert_test_db,
    read_row,
    seed,
    set_journal_mode,
    update_test_db,
)
from sqlite_testkit.db import fixtures as fixtures_module
from sqlite_testkit.exceptions import DatabaseError


@pytest.fixture
def db(lg, db_path):
    sqlite = SQLite.for_path(lg, db_path)
    yield sqlite
    sqlite.dispose()


@pytest.fixture
def conn(db):
    with db.connect() as connection:
        yield connection


def notes(conn):
    return conn.execute(text("SELECT id, text FROM main.notes ORDER BY id")).all()


@pytest.mark.unit
class TestCreateNote:
    """Test random note generation."""

    def test_vocabulary(self):
        assert len(WORDS) == 58
        assert WORDS[0] == "Cras"
        assert WORDS[-1] == "venenatis"

    def test_words_each_followed_by_space(self):
        seed(1)
        for _ in range(50):
            note = create_note(10)
            words = note.split(" ")
            assert words[-1] == ""
            assert len(words) - 1 < 10
            assert all(word in WORDS for word in words[:-1])

    def test_single_word_bound_gives_empty_note(self):
        """Test a bound of one always produces an empty note."""
        assert create_note(1) == ""

    def test_deterministic_for_seed(self):
        seed(42)
        first = [create_note(20) for _ in range(5)]
        seed(42)
        assert [create_note(20) for _ in range(5)] == first


@pytest.mark.unit
class TestInitTestDb:
    """Test table creation and seeding."""

    def test_inserts_rows(self, conn):
        init_test_db(conn, "main", 42, 100, 10)

        rows = notes(conn)
        assert len(rows) == 100
        assert [r.id for r in rows] == list(range(1, 101))

    def test_same_seed_same_contents(self, lg, temp_dir):
        """Test equal seeds produce equal databases."""
        contents = []
        for name in ("a.db", "b.db"):
            db = SQLite.for_path(lg, temp_dir / name)
            with db.connect() as conn:
                init_test_db(conn, "main", 7, 20, 15)
                contents.append([r.text for r in notes(conn)])
            db.dispose()

        assert contents[0] == contents[1]

    def test_logs_row_count(self, conn, lg, log_stream):
        init_test_db(conn, "main", 1, 5, 3, lg=lg)
        assert "[rows:5]" in log_stream.getvalue()

    def test_module_logger_by_default(self, conn, caplog):
        with caplog.at_level(logging.DEBUG, logger=fixtures_module.__name__):
            init_test_db(conn, "main", 1, 3, 3)
        assert caplog.records[-1].rows == 3

    def test_committed_for_other_connections(self, db, conn):
        """Test rows are visible to a second connection."""
        init_test_db(conn, "main", 42, 10, 5)

        with db.connect() as other:
            count = other.execute(text("SELECT COUNT(*) FROM notes")).scalar_one()
        assert count == 10

    def test_attached_schema(self, conn, temp_dir):
        conn.exec_driver_sql(f"ATTACH DATABASE '{temp_dir / 'aux.db'}' AS aux")

        init_test_db(conn, "aux", 3, 4, 5)

        assert read_row(conn, "aux", 4) is not None

    def test_invalid_schema(self, conn):
        with pytest.raises(DatabaseError, match="Invalid schema"):
            init_test_db(conn, "main; DROP TABLE x", 1, 1, 1)


@pytest.mark.unit
class TestJournalMode:
    """Test set_journal_mode."""

    @pytest.mark.parametrize("mode", ["WAL", "wal", "DELETE", "truncate", "persist"])
    def test_set_mode(self, conn, mode):
        set_journal_mode(conn, mode, "main")

        actual = conn.execute(text("PRAGMA main.journal_mode")).scalar()
        assert actual.lower() == mode.lower()

    def test_unknown_mode(self, conn):
        with pytest.raises(DatabaseError, match="Unknown journal mode"):
            set_journal_mode(conn, "fast", "main")

    def test_mismatch_raises(self, lg):
        """Test a mode SQLite refuses is reported."""
        db = SQLite(lg, type("Cfg", (), {"url": "sqlite://"})())
        try:
            with db.connect() as conn:
                with pytest.raises(DatabaseError, match="Could not set journal mode"):
                    set_journal_mode(conn, "WAL", "main")
        finally:
            db.dispose()


@pytest.mark.unit
class TestRowOperations:
    """Test insert, update and read."""

    def test_insert_returns_next_id(self, conn):
        init_test_db(conn, "main", 42, 100, 10)
        assert insert_test_db(conn, "main", 15) == 101
        assert insert_test_db(conn, "main", 15) == 102

    def test_update_changes_text(self, conn):
        init_test_db(conn, "main", 42, 10, 30)
        seed(999)
        before = read_row(conn, "main", 1)

        for _ in range(10):
            update_test_db(conn, "main", 1, 30)
            if read_row(conn, "main", 1) != before:
                break

        assert read_row(conn, "main", 1) != before

    def test_update_missing_row_is_noop(self, conn):
        init_test_db(conn, "main", 42, 2, 5)
        update_test_db(conn, "main", 50, 5)
        assert len(notes(conn)) == 2

    def test_read_row(self, conn):
        init_test_db(conn, "main", 42, 3, 5)
        row = notes(conn)[1]
        assert read_row(conn, "main", 2) == row.text

    def test_read_missing_row(self, conn):
        init_test_db(conn, "main", 42, 3, 5)
        with pytest.raises(DatabaseError, match="Row not found"):
            read_row(conn, "main", 4)
