"""Terminal output for the kanri CLI."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from ..models import Card, Column

GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
DIM = "\033[2m"
RESET = "\033[0m"

CHECK = "✓"
BULLET = "•"
CROSS = "✗"

PRIORITY_COLORS = {"high": RED, "medium": YELLOW, "low": DIM}


def _supports_color(stream: TextIO | None = None) -> bool:
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


def _colorize(text: str, color: str, stream: TextIO | None = None) -> str:
    """Wrap ``text`` in an ANSI color when ``stream`` is a terminal."""
    if not color or not _supports_color(stream):
        return text
    return f"{color}{text}{RESET}"


def _emit(marker: str, color: str, message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(f"{_colorize(marker, color, stream)} {message}", file=stream)


def success(message: str) -> None:
    _emit(CHECK, GREEN, message)


def info(message: str) -> None:
    _emit(BULLET, YELLOW, message)


def error(message: str) -> None:
    """Print to stderr, marked with a red cross."""
    _emit(CROSS, RED, message, sys.stderr)


def header(message: str) -> None:
    print(_colorize(message, BLUE))


def detail(message: str, indent: int = 2) -> None:
    """Print an indented, dimmed line under a header."""
    print(" " * indent + _colorize(message, DIM))


def column_line(column: Column, card_count: int) -> str:
    """
    One-line summary of a column.

    The count turns red once it exceeds the column's WIP limit.
    """
    count = str(card_count)
    if column.wip_limit:
        count = f"{card_count}/{column.wip_limit}"
        if card_count > column.wip_limit:
            count = _colorize(count, RED)
    disabled = "" if column.is_enabled else " (disabled)"
    return f"[{column.position}] {column.title}{disabled} ({count})  {column.id}"


def card_line(card: Card) -> str:
    priority = _colorize(card.priority, PRIORITY_COLORS.get(card.priority, ""))
    due = f" due {card.due_date}" if card.due_date else ""
    return f"{card.position}. {card.title} [{priority}]{due}  {card.id}"
