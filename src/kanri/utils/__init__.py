"""Utility functions."""

from .datetime import from_iso, now_iso, now_utc, to_iso
from .ids import new_id

__all__ = [
    "from_iso",
    "new_id",
    "now_iso",
    "now_utc",
    "to_iso",
]
