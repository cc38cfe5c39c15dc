"""Generic CRUD over ``Record`` models."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

import aiosqlite

from ..errors import NotFoundError
from ..models.record import Record
from ..storage.query import UpdateBuilder

R = TypeVar("R", bound=Record)


class RecordRepository:
    """
    Row-level access for every entity table.

    Models describe their own table and columns, so one implementation
    serves boards, columns, cards, subtasks, tags and notes.
    """

    async def get(
        self, conn: aiosqlite.Connection, model: type[R], record_id: str
    ) -> R | None:
        """Load one record by primary key."""
        async with conn.execute(model.select_sql("id = ?"), (record_id,)) as cursor:
            row = await cursor.fetchone()
        return None if row is None else model.from_row(row)

    async def require(
        self, conn: aiosqlite.Connection, model: type[R], record_id: str
    ) -> R:
        """Load one record by primary key or raise ``NotFoundError``."""
        record = await self.get(conn, model, record_id)
        if record is None:
            raise NotFoundError(f"{model.__name__} not found: {record_id}")
        return record

    async def find(
        self,
        conn: aiosqlite.Connection,
        model: type[R],
        where: str = "",
        params: Sequence[Any] = (),
        order_by: str = "",
    ) -> list[R]:
        """Load records matching a parameterized WHERE clause."""
        async with conn.execute(model.select_sql(where, order_by), tuple(params)) as cursor:
            rows = await cursor.fetchall()
        return [model.from_row(row) for row in rows]

    async def insert(
        self, conn: aiosqlite.Connection, model: type[Record], values: dict[str, Any]
    ) -> None:
        """Insert one row; keys must be column names of ``model``."""
        unknown = set(values) - set(model.column_names())
        if unknown:
            raise ValueError(f"Unknown columns for {model.TABLE}: {sorted(unknown)}")
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        await conn.execute(
            f"INSERT INTO {model.TABLE} ({columns}) VALUES ({placeholders})",
            tuple(values.values()),
        )

    async def update(
        self, conn: aiosqlite.Connection, builder: UpdateBuilder, **where: Any
    ) -> int:
        """Run a built UPDATE; returns affected row count."""
        sql, params = builder.build(**where)
        cursor = await conn.execute(sql, params)
        return cursor.rowcount

    async def delete(self, conn: aiosqlite.Connection, table: str, **where: Any) -> int:
        """Delete rows matching all ``where`` equalities; returns row count."""
        if not where:
            raise ValueError("DELETE without a WHERE clause is not allowed")
        where_clause = " AND ".join(f"{column} = ?" for column in where)
        cursor = await conn.execute(
            f"DELETE FROM {table} WHERE {where_clause}", tuple(where.values())
        )
        return cursor.rowcount

    async def exists(self, conn: aiosqlite.Connection, table: str, **where: Any) -> bool:
        """True if at least one row matches."""
        where_clause = " AND ".join(f"{column} = ?" for column in where)
        async with conn.execute(
            f"SELECT 1 FROM {table} WHERE {where_clause} LIMIT 1", tuple(where.values())
        ) as cursor:
            return await cursor.fetchone() is not None
