# tests/test_overdue.py

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from taskdeck.tasks.overdue import OverdueMonitor, find_overdue
from taskdeck.tasks.task_cache import TaskCache
from taskdeck.tasks.task_models import Task

from .fakes import FakeTaskApi

NOW = datetime(2025, 6, 19, 12, 0, tzinfo=timezone.utc)


def _task(id: int, due: date | None, completed: bool = False) -> Task:
    return Task(id=id, title=f"t{id}", description="", completed=completed, due_date=due)


def test_find_overdue_rules() -> None:
    past_open = _task(1, date(2025, 6, 18))
    past_done = _task(2, date(2025, 6, 1), completed=True)
    today = _task(3, date(2025, 6, 19))  # midnight today is already before NOW
    future = _task(4, date(2025, 6, 20))
    undated = _task(5, None)

    out = find_overdue([past_open, past_done, today, future, undated], NOW)
    assert out == [past_open, today]


def test_find_overdue_lists_each_task_once() -> None:
    t = _task(1, date(2025, 1, 1))
    assert find_overdue([t, t], NOW) == [t]


def test_alert_opens_and_stays_open_until_dismissed() -> None:
    monitor = OverdueMonitor(clock=lambda: NOW)
    assert monitor.is_open is False

    monitor.recompute([_task(1, date(2025, 6, 1))])
    assert monitor.is_open is True
    assert [t.id for t in monitor.overdue] == [1]

    # A refresh with nothing overdue changes the content but does not close it.
    monitor.recompute([_task(1, date(2025, 6, 1), completed=True)])
    assert monitor.is_open is True
    assert monitor.overdue == []

    monitor.dismiss()
    assert monitor.is_open is False


def test_alert_does_not_open_without_overdue_tasks() -> None:
    monitor = OverdueMonitor(clock=lambda: NOW)
    monitor.recompute([_task(1, date(2025, 7, 1)), _task(2, None)])
    assert monitor.is_open is False


@pytest.mark.asyncio
async def test_monitor_follows_task_cache() -> None:
    api = FakeTaskApi([_task(1, date(2025, 6, 1)), _task(2, date(2025, 6, 2), completed=True)])
    cache = TaskCache(api)
    monitor = OverdueMonitor(cache, clock=lambda: NOW)

    await cache.fetch_all()
    assert monitor.is_open is True
    assert [t.id for t in monitor.overdue] == [1]

    await cache.toggle_completion(1)
    assert monitor.overdue == []
    assert monitor.is_open is True


def test_reset_closes_alert_and_allows_reopening() -> None:
    monitor = OverdueMonitor(clock=lambda: NOW)
    monitor.recompute([_task(1, date(2025, 6, 1))])
    assert monitor.is_open is True

    monitor.reset()
    assert monitor.is_open is False
    assert monitor.overdue == []

    monitor.recompute([_task(1, date(2025, 6, 1))])
    assert monitor.is_open is True
