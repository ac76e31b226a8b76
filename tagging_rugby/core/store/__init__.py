"""
Persistence for tagging-rugby.

Provides the SQLite note store and the schema migration runner.
"""

from tagging_rugby.core.store.migrations import Migration, load_migrations, run_migrations
from tagging_rugby.core.store.sqlite_store import SQLiteNoteStore, validate_children

__all__ = [
    "SQLiteNoteStore",
    "validate_children",
    "Migration",
    "load_migrations",
    "run_migrations",
]
