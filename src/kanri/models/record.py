"""Declarative row <-> external representation mapping."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """
    Base for every persisted entity.

    Subclasses declare ``TABLE`` and their fields; fields named in
    ``RELATIONS`` are filled by services rather than read from the table.
    The external (GUI-facing) representation is the camelCase dump.
    """

    TABLE: ClassVar[str] = ""
    RELATIONS: ClassVar[frozenset[str]] = frozenset()

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def column_names(cls) -> list[str]:
        """Table columns, in field declaration order."""
        return [name for name in cls.model_fields if name not in cls.RELATIONS]

    @classmethod
    def select_sql(cls, where: str = "", order_by: str = "") -> str:
        """``SELECT <columns> FROM <table>`` with optional clauses."""
        sql = f"SELECT {', '.join(cls.column_names())} FROM {cls.TABLE}"
        if where:
            sql += f" WHERE {where}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        return sql

    @classmethod
    def from_row(cls, row: Mapping[str, Any], **relations: Any) -> Self:
        """Build a record from a database row."""
        data = {name: row[name] for name in cls.column_names()}
        data.update(relations)
        return cls.model_validate(data)

    def to_external(self) -> dict[str, Any]:
        """JSON-ready camelCase dict for the GUI layer."""
        return self.model_dump(by_alias=True, mode="json")
