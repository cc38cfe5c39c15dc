"""Shared fixtures: a fresh SQLite database per test."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from kanri.app import Kanri
from kanri.config import Settings
from kanri.models import Board, Column
from kanri.storage import Database


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Database file inside the test's temporary directory."""
    return tmp_path / "data" / "kanri.db"


@pytest.fixture
async def db(db_path: Path) -> AsyncIterator[Database]:
    """An opened Database with the schema applied."""
    database = Database(db_path)
    await database.open()
    yield database
    await database.close()


@pytest.fixture
def notifications() -> list[tuple[str, str]]:
    """Reminders delivered during the test, as (title, body)."""
    return []


@pytest.fixture
async def app(db_path: Path, notifications: list[tuple[str, str]]) -> AsyncIterator[Kanri]:
    """A fully wired application on a temporary database."""

    async def notifier(title: str, body: str) -> None:
        notifications.append((title, body))

    async with Kanri(Settings(db_path=db_path), notifier=notifier) as kanri:
        yield kanri


@pytest.fixture
async def board(app: Kanri) -> Board:
    """A board with no columns."""
    return await app.board_service.create_board("Roadmap")


@pytest.fixture
async def columns(app: Kanri, board: Board) -> list[Column]:
    """Three columns: Todo, Doing, Done."""
    return [
        await app.column_service.create_column(board.id, title)
        for title in ("Todo", "Doing", "Done")
    ]


@pytest.fixture
def card_order(app: Kanri):
    """Read (title, position) pairs of a column straight from the table."""

    async def read(column_id: str) -> list[tuple[str, int]]:
        async with app.db.connection() as conn:
            async with conn.execute(
                "SELECT title, position FROM kanban_cards WHERE column_id = ? "
                "ORDER BY position ASC, created_at ASC, id ASC",
                (column_id,),
            ) as cursor:
                return [(row["title"], row["position"]) for row in await cursor.fetchall()]

    return read
