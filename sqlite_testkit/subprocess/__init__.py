"""
Interactive subprocess sessions.

Turns a long-running interactive command-line process into a synchronous
request/response service, with guaranteed, timeout-bounded cleanup.
"""

from .config import SessionConfig
from .session import InteractiveSession, SessionState, should_log_error
from .sqlite3_process import (
    CREATE_TEST_TABLE_SQL,
    DISABLE_CHECKPOINT_SQL,
    DUMMY_ROW_COUNT,
    WAL_MODE_SQL,
    Sqlite3Process,
    dummy_insert_sql,
)

__all__ = [
    "InteractiveSession",
    "Sqlite3Process",
    "SessionConfig",
    "SessionState",
    "should_log_error",
    "WAL_MODE_SQL",
    "DISABLE_CHECKPOINT_SQL",
    "CREATE_TEST_TABLE_SQL",
    "DUMMY_ROW_COUNT",
    "dummy_insert_sql",
]
