"""kanri - kanban boards, cards and notes on SQLite."""

__version__ = "0.1.0"
