"""Card reminder timers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime

from ..utils import from_iso, now_utc

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], Awaitable[None]]

REMINDER_TITLE = "Task reminder"


class ReminderScheduler:
    """
    One pending reminder per card.

    Scheduling a card again replaces its earlier timer, and deleting or
    clearing a reminder cancels it. The notifier is any coroutine function
    taking ``(title, body)``; delivery itself is outside this class.
    """

    def __init__(self, notifier: Notifier | None = None) -> None:
        self._notifier = notifier
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def schedule(
        self, card_id: str, remind_at: str | datetime, card_title: str | None = None
    ) -> asyncio.Task[None] | None:
        """
        Start (or restart) the timer for ``card_id``.

        A time in the past fires on the next loop iteration. Unparseable
        timestamps are logged and nothing is scheduled.

        Returns the timer task, or None when nothing was scheduled.
        """
        self.cancel(card_id)

        if isinstance(remind_at, datetime):
            when = remind_at
        else:
            try:
                when = from_iso(remind_at)
            except ValueError:
                logger.warning("Ignoring reminder for card %s: bad timestamp %r", card_id, remind_at)
                return None

        delay = max(0.0, (when - now_utc()).total_seconds())
        body = f"You asked to be reminded about {card_title or f'card {card_id}'}"
        task = asyncio.create_task(self._fire(card_id, delay, body), name=f"reminder:{card_id}")
        self._tasks[card_id] = task
        task.add_done_callback(lambda t, key=card_id: self._forget(key, t))
        logger.info("Reminder scheduled for card %s in %.0fs", card_id, delay)
        return task

    def cancel(self, card_id: str) -> bool:
        """Cancel the pending reminder of a card. Returns True if one was pending."""
        task = self._tasks.pop(card_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Reminder cancelled for card %s", card_id)
        return True

    def cancel_many(self, card_ids: Iterable[str]) -> int:
        """Cancel the reminders of several cards. Returns how many were pending."""
        return sum(self.cancel(card_id) for card_id in card_ids)

    async def cancel_all(self) -> None:
        """Cancel every pending reminder and wait for the timers to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if tasks:
            logger.debug("Cancelled %d reminder(s)", len(tasks))

    def pending(self) -> list[str]:
        """Card ids with a reminder still waiting to fire."""
        return sorted(card_id for card_id, task in self._tasks.items() if not task.done())

    async def _fire(self, card_id: str, delay: float, body: str) -> None:
        await asyncio.sleep(delay)
        if self._notifier is None:
            logger.info("Reminder due for card %s (no notifier configured)", card_id)
            return
        try:
            await self._notifier(REMINDER_TITLE, body)
        except Exception:
            logger.exception("Failed to deliver reminder for card %s", card_id)
        else:
            logger.info("Reminder delivered for card %s", card_id)

    def _forget(self, card_id: str, task: asyncio.Task[None]) -> None:
        # A rescheduled card already holds a newer task under the same key.
        if self._tasks.get(card_id) is task:
            del self._tasks[card_id]
