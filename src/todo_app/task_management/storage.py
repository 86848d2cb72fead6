"""Durable key/value storage backed by SQLite."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from todo_app.task_management.exceptions import (
    PersistenceReadError,
    PersistenceWriteError,
    StorageError,
)


class LocalStorage:
    """
    SQLite-backed string store with named entries.

    Each entry is written with a single statement inside its own transaction,
    so readers only ever see the previous or the new value of an entry.
    """

    def __init__(self, db_path: str, wal_mode: bool = True) -> None:
        """
        Initialize storage.

        Args:
            db_path: Path to SQLite database file (use ":memory:" for in-memory)
            wal_mode: Enable WAL journaling
        """
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Open the connection and create the entries table."""
        if self._connection is None:
            if self.db_path != ":memory:":
                directory = os.path.dirname(self.db_path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
            try:
                self._connection = await aiosqlite.connect(self.db_path)
                # WAL is not supported for in-memory databases
                if self.wal_mode and self.db_path != ":memory:":
                    await self._connection.execute("PRAGMA journal_mode=WAL")
            except aiosqlite.Error as e:
                raise StorageError(f"Failed to open storage at {self.db_path}: {e}") from e

        async with self._get_connection() as conn:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            await conn.commit()

    @asynccontextmanager
    async def _get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Get database connection context manager.

        Yields:
            Database connection

        Raises:
            StorageError: If connection is not initialized
        """
        if self._connection is None:
            raise StorageError("Storage not initialized")
        yield self._connection

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def get_item(self, key: str) -> str | None:
        """
        Read a named entry.

        Args:
            key: Entry name

        Returns:
            Stored value, or None if the entry does not exist

        Raises:
            PersistenceReadError: If the read fails
        """
        try:
            async with self._get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT value FROM entries WHERE key = ?", (key,)
                )
                row = await cursor.fetchone()
        except StorageError as e:
            raise PersistenceReadError(str(e)) from e
        except aiosqlite.Error as e:
            raise PersistenceReadError(f"Failed to read entry {key!r}: {e}") from e

        return row[0] if row else None

    async def set_item(self, key: str, value: str) -> None:
        """
        Write a named entry, replacing any previous value.

        Args:
            key: Entry name
            value: Serialized value

        Raises:
            PersistenceWriteError: If the write fails (e.g. disk full)
        """
        try:
            async with self._get_connection() as conn:
                await conn.execute(
                    "INSERT OR REPLACE INTO entries (key, value) VALUES (?, ?)",
                    (key, value),
                )
                await conn.commit()
        except StorageError as e:
            raise PersistenceWriteError(str(e)) from e
        except aiosqlite.Error as e:
            if self._connection is not None:
                try:
                    await self._connection.rollback()
                except aiosqlite.Error as rollback_error:
                    raise PersistenceWriteError(
                        f"Failed to write entry {key!r}: {e} "
                        f"(rollback failed: {rollback_error})"
                    ) from e
            raise PersistenceWriteError(f"Failed to write entry {key!r}: {e}") from e

    async def remove_item(self, key: str) -> None:
        """
        Delete a named entry if present.

        Raises:
            PersistenceWriteError: If the delete fails
        """
        try:
            async with self._get_connection() as conn:
                await conn.execute("DELETE FROM entries WHERE key = ?", (key,))
                await conn.commit()
        except StorageError as e:
            raise PersistenceWriteError(str(e)) from e
        except aiosqlite.Error as e:
            raise PersistenceWriteError(f"Failed to remove entry {key!r}: {e}") from e
