"""Service for card CRUD, tagging and moves."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import aiosqlite

from ..errors import ValidationError
from ..models import CARDS, DEFAULT_PRIORITY, Card, Subtask, Tag
from ..repositories import RecordRepository
from ..storage import Database, UpdateBuilder
from ..utils import new_id, now_iso
from .ordering import OrderingService
from .reminder_service import ReminderScheduler
from .validation import UNSET, is_set, optional_text, require_text, validate_priority

logger = logging.getLogger(__name__)

_ORDER = "position ASC, created_at ASC, id ASC"


def _placeholders(values: list[Any]) -> str:
    return ", ".join("?" for _ in values)


async def attach_relations(
    conn: aiosqlite.Connection, records: RecordRepository, cards: list[Card]
) -> list[Card]:
    """Return ``cards`` with their ordered subtasks and tags filled in."""
    if not cards:
        return []
    card_ids = [card.id for card in cards]

    subtasks = await records.find(
        conn, Subtask, f"card_id IN ({_placeholders(card_ids)})", card_ids, order_by=_ORDER
    )
    subtasks_by_card: dict[str, list[Subtask]] = {}
    for subtask in subtasks:
        subtasks_by_card.setdefault(subtask.card_id, []).append(subtask)

    tag_columns = ", ".join(f"t.{name}" for name in Tag.column_names())
    sql = (
        f"SELECT ct.card_id AS link_card_id, {tag_columns} "
        "FROM kanban_card_tags ct JOIN kanban_tags t ON t.id = ct.tag_id "
        f"WHERE ct.card_id IN ({_placeholders(card_ids)}) ORDER BY t.id"
    )
    tags_by_card: dict[str, list[Tag]] = {}
    async with conn.execute(sql, card_ids) as cursor:
        for row in await cursor.fetchall():
            tags_by_card.setdefault(row["link_card_id"], []).append(Tag.from_row(row))

    return [
        card.model_copy(
            update={
                "subtasks": subtasks_by_card.get(card.id, []),
                "tags": tags_by_card.get(card.id, []),
            }
        )
        for card in cards
    ]


async def reminder_card_ids(
    conn: aiosqlite.Connection, parent_key: str, parent_id: str
) -> list[str]:
    """Ids of cards under ``parent_key = parent_id`` that have a reminder set."""
    async with conn.execute(
        f"SELECT id FROM kanban_cards WHERE {parent_key} = ? AND remind_at IS NOT NULL",
        (parent_id,),
    ) as cursor:
        return [row["id"] for row in await cursor.fetchall()]


class CardService:
    """Service for card CRUD operations."""

    def __init__(
        self,
        db: Database,
        records: RecordRepository | None = None,
        ordering: OrderingService | None = None,
        reminders: ReminderScheduler | None = None,
    ) -> None:
        self.db = db
        self.records = records or RecordRepository()
        self.ordering = ordering or OrderingService()
        self.reminders = reminders

    async def list_cards(self, board_id: str) -> list[Card]:
        """All cards of a board with subtasks and tags."""
        async with self.db.connection() as conn:
            cards = await self.records.find(conn, Card, "board_id = ?", (board_id,), order_by=_ORDER)
            return await attach_relations(conn, self.records, cards)

    async def get_card(self, card_id: str) -> Card | None:
        """Get a card by ID."""
        async with self.db.connection() as conn:
            return await self._load(conn, card_id)

    async def create_card(
        self,
        board_id: str,
        column_id: str,
        title: str,
        description: str | None = None,
        position: int | None = None,
        priority: str = DEFAULT_PRIORITY,
        due_date: str | None = None,
        tag_ids: Iterable[str] | None = None,
        card_id: str | None = None,
    ) -> Card:
        """
        Create a card in a column of the board.

        ``position=None`` appends to the column; other values are clamped to
        ``[0, card count]``.

        Raises:
            NotFoundError: The column does not exist.
            OwnershipViolation: The column belongs to another board.
        """
        card_id = card_id or new_id()
        now = now_iso()
        values = {
            "id": card_id,
            "board_id": board_id,
            "column_id": column_id,
            "title": require_text(title, "Card title"),
            "description": optional_text(description),
            "priority": validate_priority(priority),
            "due_date": optional_text(due_date),
            "created_at": now,
            "updated_at": now,
        }
        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_scope_in_owner(conn, CARDS, column_id, board_id)
            values["position"] = await self.ordering.next_position(conn, CARDS, column_id)
            await self.records.insert(conn, Card, values)
            index = await self.ordering.insert(conn, CARDS, column_id, card_id, position)
            if tag_ids:
                await self._replace_tags(conn, card_id, board_id, tag_ids)
            card = await self._require(conn, card_id)
        logger.info("Card created: %s in column %s at %d", card_id, column_id, index)
        return card

    async def update_card(
        self,
        card_id: str,
        board_id: str,
        *,
        title: Any = UNSET,
        description: Any = UNSET,
        priority: Any = UNSET,
        due_date: Any = UNSET,
        remind_at: Any = UNSET,
    ) -> Card:
        """
        Change card attributes; only supplied arguments are written.

        ``None`` (or a blank string) clears ``description``, ``due_date`` and
        ``remind_at``. A new ``remind_at`` replaces any pending reminder; a
        cleared one cancels it.
        """
        builder = UpdateBuilder(Card.TABLE)
        if is_set(title):
            builder.set("title", require_text(title, "Card title"))
        if is_set(description):
            builder.set("description", optional_text(description))
        if is_set(priority):
            builder.set("priority", validate_priority(priority))
        if is_set(due_date):
            builder.set("due_date", optional_text(due_date))
        new_remind_at: str | None = None
        if is_set(remind_at):
            new_remind_at = optional_text(remind_at)
            builder.set("remind_at", new_remind_at)

        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_owner(conn, CARDS, card_id, board_id)
            if builder.has_changes:
                await self.records.update(conn, builder, id=card_id)
            card = await self._require(conn, card_id)

        if builder.has_changes:
            logger.info("Card updated: %s (%s)", card_id, ", ".join(builder.columns))
        if is_set(remind_at) and self.reminders is not None:
            if new_remind_at is None:
                self.reminders.cancel(card_id)
            else:
                self.reminders.schedule(card_id, new_remind_at, card.title)
        return card

    async def delete_card(self, card_id: str, board_id: str) -> None:
        """Delete a card, renumber its column and drop any pending reminder."""
        async with self.db.transaction() as conn:
            location = await self.ordering.validator.assert_owner(conn, CARDS, card_id, board_id)
            await self.ordering.remove(conn, CARDS, card_id, location.scope_id)
        if self.reminders is not None:
            self.reminders.cancel(card_id)
        logger.info("Card deleted: %s from column %s", card_id, location.scope_id)

    async def move_card(
        self,
        board_id: str,
        card_id: str,
        from_column_id: str,
        to_column_id: str,
        target_index: int,
    ) -> Card:
        """
        Move a card within its column or to another column of the same board.

        Raises:
            NotFoundError: Card or destination column does not exist.
            OwnershipViolation: Card is not on ``board_id`` or not in ``from_column_id``.
            ScopeMismatch: Destination column is on another board.
        """
        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_owner(conn, CARDS, card_id, board_id)
            result = await self.ordering.move(
                conn, CARDS, card_id, from_column_id, to_column_id, target_index
            )
            card = await self._require(conn, card_id)
        if result.cross_scope:
            logger.info(
                "Card moved: %s (%s -> %s) at %d",
                card_id,
                from_column_id,
                to_column_id,
                result.index,
            )
        else:
            logger.info("Card reordered: %s in %s at %d", card_id, from_column_id, result.index)
        return card

    async def set_card_tags(
        self, card_id: str, board_id: str, tag_ids: Iterable[str]
    ) -> list[Tag]:
        """
        Replace a card's tags.

        Duplicates are ignored; every tag must belong to the card's board.
        Returns the attached tags sorted by id.
        """
        async with self.db.transaction() as conn:
            await self.ordering.validator.assert_owner(conn, CARDS, card_id, board_id)
            tags = await self._replace_tags(conn, card_id, board_id, tag_ids)
        logger.info("Card tags set: %s (%d tags)", card_id, len(tags))
        return tags

    async def _replace_tags(
        self,
        conn: aiosqlite.Connection,
        card_id: str,
        board_id: str,
        tag_ids: Iterable[str],
    ) -> list[Tag]:
        unique_ids = sorted(set(tag_ids))
        tags: list[Tag] = []
        if unique_ids:
            tags = await self.records.find(
                conn,
                Tag,
                f"board_id = ? AND id IN ({_placeholders(unique_ids)})",
                [board_id, *unique_ids],
                order_by="id ASC",
            )
            missing = set(unique_ids) - {tag.id for tag in tags}
            if missing:
                raise ValidationError(
                    f"Tags not found on board {board_id}: {', '.join(sorted(missing))}"
                )

        await self.records.delete(conn, "kanban_card_tags", card_id=card_id)
        await conn.executemany(
            "INSERT INTO kanban_card_tags (card_id, tag_id) VALUES (?, ?)",
            [(card_id, tag_id) for tag_id in unique_ids],
        )
        return tags

    async def _load(self, conn: aiosqlite.Connection, card_id: str) -> Card | None:
        card = await self.records.get(conn, Card, card_id)
        if card is None:
            return None
        loaded = await attach_relations(conn, self.records, [card])
        return loaded[0]

    async def _require(self, conn: aiosqlite.Connection, card_id: str) -> Card:
        card = await self.records.require(conn, Card, card_id)
        loaded = await attach_relations(conn, self.records, [card])
        return loaded[0]

