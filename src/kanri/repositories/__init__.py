"""Repository layer for data access."""

from .positions import PositionStore
from .protocol import ItemLocation, PositionStoreProtocol
from .records import RecordRepository

__all__ = [
    "ItemLocation",
    "PositionStore",
    "PositionStoreProtocol",
    "RecordRepository",
]
