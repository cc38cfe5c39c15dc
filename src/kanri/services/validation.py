"""Input normalization shared by the entity services."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Final

from ..errors import ValidationError
from ..models import (
    ALLOWED_BOARD_ICONS,
    ALLOWED_COLUMN_ICONS,
    DEFAULT_BOARD_ICON,
    PRIORITIES,
)

MAX_TITLE_LENGTH = 200
MAX_LABEL_LENGTH = 100

_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


# Marks update arguments the caller did not supply; ``None`` means "clear".
UNSET: Final = _Unset.UNSET


def is_set(value: Any) -> bool:
    return value is not UNSET


def require_text(value: str | None, field: str = "Title", max_length: int = MAX_TITLE_LENGTH) -> str:
    """Trim ``value``; reject it when empty or longer than ``max_length``."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} cannot be empty")
    if len(text) > max_length:
        raise ValidationError(f"{field} too long (max {max_length} characters)")
    return text


def optional_text(value: str | None) -> str | None:
    """Trim ``value``; blank becomes ``None``."""
    if value is None:
        return None
    text = value.strip()
    return text or None


def normalize_color(value: str | None, field: str = "Color") -> str | None:
    """Accept ``#RRGGBB``; blank becomes ``None``."""
    text = optional_text(value)
    if text is None:
        return None
    if not _HEX_COLOR.fullmatch(text):
        raise ValidationError(f"{field} must be a hex colour such as #6366F1, got {value!r}")
    return text


def normalize_board_icon(value: str | None) -> str:
    """Known board icon name; blank becomes the default."""
    text = optional_text(value)
    if text is None:
        return DEFAULT_BOARD_ICON
    if text not in ALLOWED_BOARD_ICONS:
        raise ValidationError(f"Invalid board icon: {text}")
    return text


def normalize_column_icon(value: str | None) -> str | None:
    """Known column icon name; blank becomes ``None`` (read back as default)."""
    text = optional_text(value)
    if text is None:
        return None
    if text not in ALLOWED_COLUMN_ICONS:
        raise ValidationError(f"Invalid column icon: {text}")
    return text


def validate_priority(value: str) -> str:
    if value not in PRIORITIES:
        raise ValidationError(
            f"Invalid priority {value!r}. Use one of: {', '.join(PRIORITIES)}"
        )
    return value


def validate_wip_limit(value: int | None) -> int | None:
    if value is not None and value < 1:
        raise ValidationError("WIP limit must be at least 1")
    return value
