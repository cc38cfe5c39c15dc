"""Tests for the database pool, schema and SQL helpers."""

import time
from pathlib import Path

import aiosqlite
import pytest

from kanri.errors import NotFoundError, StorageFailure
from kanri.models import DEFAULT_WORKSPACE_ID, Workspace
from kanri.repositories import RecordRepository
from kanri.storage import Database, UpdateBuilder, initialize_schema


class TestUpdateBuilder:
    """Tests for UpdateBuilder."""

    def test_builds_only_supplied_fields(self):
        """Only set columns appear, after updated_at."""
        sql, params = UpdateBuilder("kanban_cards").set("title", "New").build(id="c1")

        assert sql == "UPDATE kanban_cards SET updated_at = ?, title = ? WHERE id = ?"
        assert params[1:] == ["New", "c1"]
        assert params[0].endswith("Z")

    def test_none_is_a_value(self):
        """Setting None writes NULL rather than skipping the column."""
        sql, params = UpdateBuilder("kanban_cards", touch=False).set("due_date", None).build(id="c1")

        assert sql == "UPDATE kanban_cards SET due_date = ? WHERE id = ?"
        assert params == [None, "c1"]

    def test_last_value_wins(self):
        """Setting a column twice keeps the last value."""
        builder = UpdateBuilder("t", touch=False).set("a", 1).set("a", 2)

        assert builder.columns == ["a"]
        assert builder.build(id="x")[1] == [2, "x"]

    def test_multiple_where_keys(self):
        """WHERE keys are ANDed."""
        sql, _ = UpdateBuilder("notes", touch=False).set("pinned", True).build(
            id="n1", board_id="b1"
        )

        assert sql.endswith("WHERE id = ? AND board_id = ?")

    def test_requires_where(self):
        """An unbounded UPDATE is refused."""
        with pytest.raises(ValueError):
            UpdateBuilder("t").set("a", 1).build()

    def test_requires_changes_without_touch(self):
        """Nothing to write is an error when updated_at is not touched."""
        builder = UpdateBuilder("t", touch=False)

        assert not builder.has_changes
        with pytest.raises(ValueError):
            builder.build(id="x")


class TestDatabase:
    """Tests for Database."""

    async def test_open_creates_file_and_tables(self, db: Database, db_path: Path):
        """open() creates parent directories and every table."""
        assert db_path.exists()
        async with db.connection() as conn:
            async with conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            ) as cursor:
                tables = {row["name"] for row in await cursor.fetchall()}

        assert {
            "kanban_boards",
            "kanban_columns",
            "kanban_cards",
            "kanban_subtasks",
            "kanban_tags",
            "kanban_card_tags",
            "notes",
            "workspaces",
        } <= tables

    async def test_pragmas(self, db: Database):
        """Connections enforce foreign keys and use WAL."""
        async with db.connection() as conn:
            async with conn.execute("PRAGMA foreign_keys") as cursor:
                assert (await cursor.fetchone())[0] == 1
            async with conn.execute("PRAGMA journal_mode") as cursor:
                assert (await cursor.fetchone())[0] == "wal"

    async def test_sqlite_errors_become_storage_failure(self, db: Database):
        """Errors inside a borrowed connection are wrapped."""
        with pytest.raises(StorageFailure):
            async with db.connection() as conn:
                await conn.execute("SELECT * FROM no_such_table")

    async def test_foreign_key_violation(self, db: Database):
        """Rows pointing at missing parents are rejected."""
        with pytest.raises(StorageFailure):
            async with db.transaction() as conn:
                await conn.execute(
                    "INSERT INTO kanban_columns (id, board_id, title, position) "
                    "VALUES ('c1', 'missing', 'Todo', 0)"
                )

    async def test_transaction_commits(self, db: Database):
        """A clean block is committed."""
        async with db.transaction() as conn:
            await conn.execute("INSERT INTO kanban_boards (id, title) VALUES ('b1', 'Board')")

        async with db.connection() as conn:
            async with conn.execute("SELECT COUNT(*) FROM kanban_boards") as cursor:
                assert (await cursor.fetchone())[0] == 1

    async def test_transaction_rolls_back(self, db: Database):
        """Any exception undoes the whole block."""
        with pytest.raises(RuntimeError):
            async with db.transaction() as conn:
                await conn.execute("INSERT INTO kanban_boards (id, title) VALUES ('b1', 'Board')")
                raise RuntimeError("boom")

        async with db.connection() as conn:
            async with conn.execute("SELECT COUNT(*) FROM kanban_boards") as cursor:
                assert (await cursor.fetchone())[0] == 0

    async def test_connections_are_reused(self, db: Database):
        """Sequential borrows share one pooled connection."""
        async with db.connection() as first:
            pass
        async with db.connection() as second:
            pass

        assert first is second

    async def test_closed_database_refuses_work(self, db_path: Path):
        """Borrowing after close() fails."""
        database = Database(db_path)
        await database.open()
        await database.close()

        with pytest.raises(StorageFailure):
            async with database.connection():
                pass

    async def test_write_lock_timeout_fails_fast(self, db: Database, db_path: Path):
        """A writer blocked past busy_timeout raises StorageFailure instead of hanging."""
        waiter = Database(db_path, busy_timeout=0.3)
        await waiter.open()
        try:
            async with db.transaction() as conn:
                await conn.execute("INSERT INTO kanban_boards (id, title) VALUES ('b1', 'Held')")
                started = time.monotonic()
                with pytest.raises(StorageFailure):
                    async with waiter.transaction():
                        pass
                elapsed = time.monotonic() - started
        finally:
            await waiter.close()

        assert elapsed < 3
        async with db.connection() as conn:
            async with conn.execute("SELECT COUNT(*) FROM kanban_boards") as cursor:
                assert (await cursor.fetchone())[0] == 1

    def test_pool_size_must_be_positive(self, db_path: Path):
        """A pool needs at least one slot."""
        with pytest.raises(ValueError):
            Database(db_path, pool_size=0)


class TestSchemaMigration:
    """Tests for additive migrations on older databases."""

    async def test_adds_missing_columns(self, tmp_path: Path):
        """Columns added in later releases are created on open."""
        path = tmp_path / "legacy.db"
        async with aiosqlite.connect(path) as conn:
            await conn.executescript(
                """
                CREATE TABLE kanban_boards (
                  id TEXT PRIMARY KEY,
                  title TEXT NOT NULL,
                  description TEXT,
                  created_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00.000Z',
                  updated_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00.000Z',
                  archived_at TEXT
                );
                CREATE TABLE kanban_columns (
                  id TEXT PRIMARY KEY,
                  board_id TEXT NOT NULL,
                  title TEXT NOT NULL,
                  position INTEGER NOT NULL,
                  wip_limit INTEGER,
                  created_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00.000Z',
                  updated_at TEXT NOT NULL DEFAULT '2024-01-01T00:00:00.000Z',
                  archived_at TEXT
                );
                INSERT INTO kanban_boards (id, title) VALUES ('b1', 'Old');
                INSERT INTO kanban_columns (id, board_id, title, position)
                VALUES ('c1', 'b1', 'Todo', 0);
                """
            )
            await conn.commit()

        async with Database(path) as database:
            async with database.connection() as conn:
                async with conn.execute("PRAGMA table_info(kanban_boards)") as cursor:
                    board_columns = {row["name"] for row in await cursor.fetchall()}
                async with conn.execute("SELECT is_enabled, icon FROM kanban_columns") as cursor:
                    row = await cursor.fetchone()
                async with conn.execute("SELECT workspace_id FROM kanban_boards") as cursor:
                    board_workspace = (await cursor.fetchone())["workspace_id"]

        assert {"icon", "emoji", "color", "workspace_id"} <= board_columns
        assert board_workspace == DEFAULT_WORKSPACE_ID
        assert row["is_enabled"] == 1
        assert row["icon"] is None

    async def test_initialize_is_repeatable(self, db: Database):
        """Running the schema twice is harmless."""
        async with db.connection() as conn:
            await initialize_schema(conn)
            await initialize_schema(conn)


class TestRecordRepository:
    """Tests for RecordRepository lookups."""

    async def test_require_returns_record(self, db: Database):
        async with db.connection() as conn:
            workspace = await RecordRepository().require(conn, Workspace, DEFAULT_WORKSPACE_ID)

        assert workspace.id == DEFAULT_WORKSPACE_ID

    async def test_require_missing_raises(self, db: Database):
        """A missing row is a NotFoundError naming the model."""
        with pytest.raises(NotFoundError, match="Workspace not found: nope"):
            async with db.connection() as conn:
                await RecordRepository().require(conn, Workspace, "nope")
