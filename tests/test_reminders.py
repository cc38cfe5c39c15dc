"""Tests for ReminderScheduler."""

import asyncio
import logging
from datetime import timedelta

from kanri.services import ReminderScheduler
from kanri.utils import now_utc, to_iso


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, title: str, body: str) -> None:
        self.calls.append((title, body))


class TestReminderScheduler:
    """Tests for scheduling, replacing and cancelling reminders."""

    async def test_past_time_fires_immediately(self):
        """A reminder in the past is delivered without waiting."""
        recorder = _Recorder()
        scheduler = ReminderScheduler(recorder)

        task = scheduler.schedule("c1", now_utc() - timedelta(seconds=30), "Pay rent")
        await task

        assert recorder.calls == [("Task reminder", "You asked to be reminded about Pay rent")]
        assert scheduler.pending() == []

    async def test_short_delay_fires(self):
        recorder = _Recorder()
        scheduler = ReminderScheduler(recorder)

        task = scheduler.schedule("c1", to_iso(now_utc() + timedelta(milliseconds=50)))
        await asyncio.wait_for(task, timeout=2)

        assert len(recorder.calls) == 1
        assert "card c1" in recorder.calls[0][1]

    async def test_reschedule_replaces(self):
        """Scheduling the same card twice keeps only the newest timer."""
        recorder = _Recorder()
        scheduler = ReminderScheduler(recorder)

        first = scheduler.schedule("c1", now_utc() + timedelta(hours=1))
        second = scheduler.schedule("c1", now_utc() - timedelta(seconds=1))
        await second
        await asyncio.sleep(0)

        assert first.cancelled()
        assert len(recorder.calls) == 1

    async def test_cancel(self):
        """cancel() stops a pending reminder."""
        recorder = _Recorder()
        scheduler = ReminderScheduler(recorder)
        scheduler.schedule("c1", now_utc() + timedelta(hours=1))

        assert scheduler.pending() == ["c1"]
        assert scheduler.cancel("c1") is True
        assert scheduler.cancel("c1") is False
        assert scheduler.pending() == []

    async def test_cancel_all(self):
        scheduler = ReminderScheduler(_Recorder())
        tasks = [
            scheduler.schedule(card_id, now_utc() + timedelta(hours=1))
            for card_id in ("a", "b")
        ]

        await scheduler.cancel_all()

        assert all(task.cancelled() for task in tasks)
        assert scheduler.pending() == []

    async def test_bad_timestamp_is_ignored(self, caplog):
        """Unparseable timestamps are logged and nothing is scheduled."""
        scheduler = ReminderScheduler(_Recorder())

        with caplog.at_level(logging.WARNING, logger="kanri"):
            assert scheduler.schedule("c1", "next tuesday") is None

        assert scheduler.pending() == []
        assert "bad timestamp" in caplog.text

    async def test_notifier_failure_is_logged(self, caplog):
        """A failing notifier does not propagate."""

        async def broken(title: str, body: str) -> None:
            raise RuntimeError("no display")

        scheduler = ReminderScheduler(broken)

        with caplog.at_level(logging.ERROR, logger="kanri"):
            await scheduler.schedule("c1", now_utc())

        assert "Failed to deliver reminder for card c1" in caplog.text

    async def test_without_notifier(self):
        """Reminders without a notifier still complete."""
        scheduler = ReminderScheduler()

        await scheduler.schedule("c1", now_utc())

        assert scheduler.pending() == []
