# src/taskdeck/tasks/overdue.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime, time, timezone

from .task_cache import TaskCache
from .task_models import Task

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def due_instant(due: date) -> datetime:
    """A calendar due date as a point in time: midnight UTC of that day."""
    return datetime.combine(due, time.min, tzinfo=timezone.utc)


def find_overdue(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Incomplete tasks whose due date lies strictly before `now` (each listed once)."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    out: list[Task] = []
    seen: set[int] = set()
    for task in tasks:
        if task.completed or task.due_date is None or task.id in seen:
            continue
        if due_instant(task.due_date) < now:
            out.append(task)
            seen.add(task.id)
    return out


class OverdueMonitor:
    """
    Dismissible "you have overdue tasks" alert derived from the task cache.

    - recompute() always refreshes the listed tasks.
    - A closed alert opens when the overdue set becomes non-empty.
    - An open alert is never closed by a recompute, only by dismiss().
    """

    def __init__(self, task_cache: TaskCache | None = None, *, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._overdue: list[Task] = []
        self._open = False
        if task_cache is not None:
            task_cache.add_listener(self.recompute)

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def overdue(self) -> list[Task]:
        return list(self._overdue)

    def recompute(self, tasks: Iterable[Task]) -> None:
        self._overdue = find_overdue(tasks, self._clock())
        if self._overdue and not self._open:
            self._open = True
            logger.info("Overdue alert opened: %d task(s)", len(self._overdue))

    def dismiss(self) -> None:
        if self._open:
            logger.debug("Overdue alert dismissed.")
        self._open = False

    def reset(self) -> None:
        """Forget the listed tasks and close the alert without counting it as a dismissal."""
        self._overdue = []
        self._open = False
