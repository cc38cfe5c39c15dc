"""Storage layer: connection pool, schema and SQL helpers."""

from .database import Database
from .query import UpdateBuilder
from .schema import initialize_schema

__all__ = [
    "Database",
    "UpdateBuilder",
    "initialize_schema",
]
