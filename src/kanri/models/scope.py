"""Ordered scope definitions.

Each ``ScopeKind`` describes one family of ordered items: which table holds
the items, which column names their parent container, and how to find the
top-level board that owns a container. Positions are dense per parent.

    ============  ================  ==============  ===============
    kind          item table        parent (scope)  owner
    ============  ================  ==============  ===============
    column        kanban_columns    board           the board
    card          kanban_cards      column          column's board
    subtask       kanban_subtasks   card            card's board
    ============  ================  ==============  ===============
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScopeKind:
    """Describes where items of one kind and their containers live."""

    name: str
    table: str
    parent_key: str
    parent_table: str
    owner_key: str
    parent_owner_key: str

    @property
    def label(self) -> str:
        """Human-readable item name for messages."""
        return self.name.capitalize()


COLUMNS = ScopeKind(
    name="column",
    table="kanban_columns",
    parent_key="board_id",
    parent_table="kanban_boards",
    owner_key="board_id",
    parent_owner_key="id",
)

CARDS = ScopeKind(
    name="card",
    table="kanban_cards",
    parent_key="column_id",
    parent_table="kanban_columns",
    owner_key="board_id",
    parent_owner_key="board_id",
)

SUBTASKS = ScopeKind(
    name="subtask",
    table="kanban_subtasks",
    parent_key="card_id",
    parent_table="kanban_cards",
    owner_key="board_id",
    parent_owner_key="board_id",
)
