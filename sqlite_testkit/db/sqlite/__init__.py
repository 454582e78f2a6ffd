"""SQLite engine wrapper."""

from .sqlite import SQLite

__all__ = ["SQLite"]
