"""Database schema and additive migrations.

New databases get every table from ``SCHEMA_SQL``. Databases created by
older releases are brought forward by ``_ensure_column`` calls, which only
ever add nullable or defaulted columns.
"""

from __future__ import annotations

import logging

import aiosqlite

from ..models.workspace import (
    DEFAULT_WORKSPACE_COLOR,
    DEFAULT_WORKSPACE_ID,
    DEFAULT_WORKSPACE_NAME,
)

logger = logging.getLogger(__name__)

_NOW = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS workspaces (
  id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  color TEXT,
  created_at TEXT NOT NULL DEFAULT {_NOW},
  updated_at TEXT NOT NULL DEFAULT {_NOW},
  archived_at TEXT
);

CREATE TABLE IF NOT EXISTS kanban_boards (
  id TEXT PRIMARY KEY,
  workspace_id TEXT REFERENCES workspaces(id),
  title TEXT NOT NULL,
  description TEXT,
  icon TEXT,
  emoji TEXT,
  color TEXT,
  created_at TEXT NOT NULL DEFAULT {_NOW},
  updated_at TEXT NOT NULL DEFAULT {_NOW},
  archived_at TEXT
);

CREATE TABLE IF NOT EXISTS kanban_columns (
  id TEXT PRIMARY KEY,
  board_id TEXT NOT NULL REFERENCES kanban_boards(id) ON DELETE CASCADE,
  title TEXT NOT NULL,
  position INTEGER NOT NULL,
  color TEXT,
  icon TEXT,
  is_enabled INTEGER NOT NULL DEFAULT 1,
  wip_limit INTEGER,
  created_at TEXT NOT NULL DEFAULT {_NOW},
  updated_at TEXT NOT NULL DEFAULT {_NOW},
  archived_at TEXT
);

CREATE TABLE IF NOT EXISTS kanban_cards (
  id TEXT PRIMARY KEY,
  board_id TEXT NOT NULL REFERENCES kanban_boards(id) ON DELETE CASCADE,
  column_id TEXT NOT NULL REFERENCES kanban_columns(id) ON DELETE CASCADE,
  title TEXT NOT NULL,
  description TEXT,
  position INTEGER NOT NULL,
  priority TEXT NOT NULL DEFAULT 'medium'
    CHECK (priority IN ('none', 'low', 'medium', 'high')),
  due_date TEXT,
  remind_at TEXT,
  created_at TEXT NOT NULL DEFAULT {_NOW},
  updated_at TEXT NOT NULL DEFAULT {_NOW},
  archived_at TEXT
);

CREATE TABLE IF NOT EXISTS kanban_subtasks (
  id TEXT PRIMARY KEY,
  board_id TEXT NOT NULL REFERENCES kanban_boards(id) ON DELETE CASCADE,
  card_id TEXT NOT NULL REFERENCES kanban_cards(id) ON DELETE CASCADE,
  title TEXT NOT NULL,
  is_completed INTEGER NOT NULL DEFAULT 0,
  position INTEGER NOT NULL,
  created_at TEXT NOT NULL DEFAULT {_NOW},
  updated_at TEXT NOT NULL DEFAULT {_NOW}
);

CREATE TABLE IF NOT EXISTS kanban_tags (
  id TEXT PRIMARY KEY,
  board_id TEXT NOT NULL REFERENCES kanban_boards(id) ON DELETE CASCADE,
  label TEXT NOT NULL,
  color TEXT,
  created_at TEXT NOT NULL DEFAULT {_NOW},
  updated_at TEXT NOT NULL DEFAULT {_NOW}
);

CREATE TABLE IF NOT EXISTS kanban_card_tags (
  card_id TEXT NOT NULL REFERENCES kanban_cards(id) ON DELETE CASCADE,
  tag_id TEXT NOT NULL REFERENCES kanban_tags(id) ON DELETE CASCADE,
  PRIMARY KEY (card_id, tag_id)
);

CREATE TABLE IF NOT EXISTS notes (
  id TEXT PRIMARY KEY,
  board_id TEXT NOT NULL REFERENCES kanban_boards(id) ON DELETE CASCADE,
  title TEXT NOT NULL,
  content TEXT NOT NULL DEFAULT '',
  pinned INTEGER NOT NULL DEFAULT 0,
  tags TEXT,
  created_at TEXT NOT NULL DEFAULT {_NOW},
  updated_at TEXT NOT NULL DEFAULT {_NOW},
  archived_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_columns_board_position ON kanban_columns(board_id, position);
CREATE INDEX IF NOT EXISTS idx_cards_board_position ON kanban_cards(board_id, position);
CREATE INDEX IF NOT EXISTS idx_cards_column_position ON kanban_cards(column_id, position);
CREATE INDEX IF NOT EXISTS idx_subtasks_card_position ON kanban_subtasks(card_id, position);
CREATE INDEX IF NOT EXISTS idx_notes_board ON notes(board_id, archived_at);
"""

# (table, column, definition) added after the first release
_ADDED_COLUMNS: list[tuple[str, str, str]] = [
    ("kanban_boards", "icon", "TEXT"),
    ("kanban_boards", "emoji", "TEXT"),
    ("kanban_boards", "color", "TEXT"),
    ("kanban_boards", "workspace_id", "TEXT REFERENCES workspaces(id)"),
    ("kanban_columns", "color", "TEXT"),
    ("kanban_columns", "icon", "TEXT"),
    ("kanban_columns", "is_enabled", "INTEGER NOT NULL DEFAULT 1"),
    ("kanban_cards", "remind_at", "TEXT"),
    ("notes", "pinned", "INTEGER NOT NULL DEFAULT 0"),
    ("notes", "tags", "TEXT"),
]


async def _ensure_column(
    conn: aiosqlite.Connection, table: str, column: str, definition: str
) -> bool:
    """Add ``column`` to ``table`` when missing. Returns True if added."""
    async with conn.execute(f"PRAGMA table_info({table})") as cursor:
        existing = {row["name"] for row in await cursor.fetchall()}
    if column in existing:
        return False
    await conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {definition}")
    logger.info("Added column %s.%s", table, column)
    return True


async def _ensure_default_workspace(conn: aiosqlite.Connection) -> None:
    """Create the default workspace and move unassigned boards into it."""
    await conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_boards_workspace ON kanban_boards(workspace_id)"
    )
    await conn.execute(
        "INSERT INTO workspaces (id, name, color) VALUES (?, ?, ?) ON CONFLICT(id) DO NOTHING",
        (DEFAULT_WORKSPACE_ID, DEFAULT_WORKSPACE_NAME, DEFAULT_WORKSPACE_COLOR),
    )
    cursor = await conn.execute(
        "UPDATE kanban_boards SET workspace_id = ? "
        "WHERE workspace_id IS NULL OR TRIM(workspace_id) = ''",
        (DEFAULT_WORKSPACE_ID,),
    )
    if cursor.rowcount:
        logger.info("Assigned %d board(s) to the default workspace", cursor.rowcount)


async def initialize_schema(conn: aiosqlite.Connection) -> None:
    """Create tables and apply additive migrations."""
    await conn.executescript(SCHEMA_SQL)
    for table, column, definition in _ADDED_COLUMNS:
        await _ensure_column(conn, table, column, definition)
    await conn.execute("UPDATE kanban_columns SET is_enabled = 1 WHERE is_enabled IS NULL")
    await _ensure_default_workspace(conn)
    await conn.commit()
