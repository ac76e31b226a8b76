"""Fixtures shared by the store and terminal UI tests."""

import sqlite3

import pytest


class WriteLock:
    """
    Exclusive write lock on a database file, held from a second connection.

    Use as a context manager; the lock is released on exit.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.connection: sqlite3.Connection | None = None

    def __enter__(self) -> "WriteLock":
        self.connection = sqlite3.connect(self.db_path, isolation_level=None)
        self.connection.execute("BEGIN EXCLUSIVE")
        return self

    def __exit__(self, *exc_info) -> None:
        self.connection.execute("ROLLBACK")
        self.connection.close()
        self.connection = None


@pytest.fixture
async def write_lock(store) -> WriteLock:
    """A WriteLock on the test store; the store's busy wait is cut to 50ms."""
    await store.connection.execute("PRAGMA busy_timeout = 50")
    return WriteLock(store.db_path)
