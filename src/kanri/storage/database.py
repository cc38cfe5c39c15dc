"""Async SQLite access with a bounded connection pool."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from types import TracebackType

import aiosqlite

from ..errors import StorageFailure
from .schema import initialize_schema

logger = logging.getLogger(__name__)


class Database:
    """
    Handle to the application's SQLite file.

    Connections are opened lazily, up to ``pool_size``, and reused. Every
    connection runs with foreign keys enforced, WAL journaling and a busy
    timeout, so a writer blocked by another transaction fails with
    ``StorageFailure`` after ``busy_timeout`` seconds instead of hanging.

    Services receive a ``Database`` in their constructor and open a
    ``transaction()`` per command; nothing here is module-global.
    """

    def __init__(
        self,
        db_path: Path | str,
        pool_size: int = 5,
        busy_timeout: float = 5.0,
    ) -> None:
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._slots = asyncio.Semaphore(pool_size)
        self._open_count = 0
        self._closed = False

    async def __aenter__(self) -> Database:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def open(self) -> None:
        """Create the database file if needed and bring the schema up to date."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._closed = False
        async with self.connection() as conn:
            await initialize_schema(conn)
        logger.info("Database ready: %s", self.db_path)

    async def close(self) -> None:
        """Close all idle connections; busy ones are closed on release."""
        self._closed = True
        while not self._idle.empty():
            conn = self._idle.get_nowait()
            await self._discard(conn)
        logger.debug("Database closed: %s", self.db_path)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a pooled connection in autocommit mode.

        sqlite errors raised while the connection is borrowed are re-raised
        as ``StorageFailure``.
        """
        conn = await self._acquire()
        try:
            yield conn
        except sqlite3.Error as exc:
            logger.error("Storage error on %s: %s", self.db_path, exc)
            raise StorageFailure(str(exc)) from exc
        finally:
            await self._release(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run the block inside one write transaction.

        ``BEGIN IMMEDIATE`` takes the write lock up front so two commands
        touching the same scope serialize. Any exception rolls the whole
        block back and propagates.
        """
        async with self.connection() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                if conn.in_transaction:
                    await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")

    async def _acquire(self) -> aiosqlite.Connection:
        if self._closed:
            raise StorageFailure("Database is closed")
        await self._slots.acquire()
        try:
            try:
                return self._idle.get_nowait()
            except asyncio.QueueEmpty:
                return await self._connect()
        except BaseException:
            self._slots.release()
            raise

    async def _release(self, conn: aiosqlite.Connection) -> None:
        try:
            if self._closed:
                await self._discard(conn)
                return
            if conn.in_transaction:
                await conn.execute("ROLLBACK")
            self._idle.put_nowait(conn)
        except sqlite3.Error:
            logger.warning("Dropping pooled connection after failed release", exc_info=True)
            await self._discard(conn)
        finally:
            self._slots.release()

    async def _connect(self) -> aiosqlite.Connection:
        try:
            conn = await aiosqlite.connect(
                self.db_path, timeout=self.busy_timeout, isolation_level=None
            )
        except sqlite3.Error as exc:
            raise StorageFailure(f"Cannot open {self.db_path}: {exc}") from exc
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA foreign_keys = ON")
        await conn.execute("PRAGMA journal_mode = WAL")
        await conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout * 1000)}")
        self._open_count += 1
        logger.debug("Opened connection %d/%d", self._open_count, self.pool_size)
        return conn

    async def _discard(self, conn: aiosqlite.Connection) -> None:
        try:
            await conn.close()
        except sqlite3.Error:
            logger.warning("Failed to close connection", exc_info=True)
        self._open_count -= 1
