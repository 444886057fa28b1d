# src/taskdeck/tasks/task_cache.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.errors import MutationResult, TaskDeckError, ValidationError
from ..core.ports import TaskApi
from .task_models import NewTask, Task, TaskPatch

logger = logging.getLogger(__name__)

TaskListener = Callable[[list[Task]], None]

FETCH_ERROR_MESSAGE = "Failed to load tasks."


class TaskCache:
    """
    Local copy of the remote task list.

    Confirm-then-resync: every mutation is sent to the service first and, once
    accepted, followed by a full fetch_all(). The response body of a mutation is
    never written into the cache, so the cache only ever holds a listing the
    service produced.

    Concurrency: no locking. Overlapping fetches resolve as "last response applied wins".
    """

    def __init__(self, api: TaskApi) -> None:
        self._api = api
        self._tasks: list[Task] = []
        self._listeners: list[TaskListener] = []
        self.loading = False
        self.error = ""

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def add_listener(self, listener: TaskListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        snapshot = self.tasks
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Task cache listener failed: %r", listener)

    def clear(self) -> None:
        """Drop every cached task (used when the session ends)."""
        self._tasks = []
        self.error = ""
        self._notify()

    # ---- read ----

    async def fetch_all(self) -> bool:
        """
        Replace the whole cache with the service's current listing.

        On failure the previous contents stay in place (stale but available) and
        `error` carries a user-facing message.
        """
        self.loading = True
        try:
            tasks = await self._api.list_tasks()
        except TaskDeckError as e:
            logger.warning("Task fetch failed: %s", e)
            self.error = FETCH_ERROR_MESSAGE
            return False
        finally:
            self.loading = False

        self._tasks = tasks
        self.error = ""
        logger.debug("Task cache replaced: %d tasks", len(tasks))
        self._notify()
        return True

    # ---- mutations ----

    async def add(self, new_task: NewTask) -> None:
        """
        Create a task on the service, then resync.

        Raises ValidationError (no network call) for an empty title; any remote
        failure propagates to the caller with the cache unchanged.
        """
        if not new_task.title.strip():
            raise ValidationError("Task title is required.")

        await self._api.create_task(new_task)
        logger.info("Task created title=%r", new_task.title.strip())
        await self.fetch_all()

    async def toggle_completion(self, task_id: int) -> MutationResult:
        try:
            await self._api.toggle_task(task_id)
        except TaskDeckError as e:
            logger.error("Toggling task %s failed: %s", task_id, e)
            return MutationResult.failure(e)

        logger.info("Task %s toggled", task_id)
        await self.fetch_all()
        return MutationResult.success()

    async def delete(self, task_id: int) -> MutationResult:
        try:
            await self._api.delete_task(task_id)
        except TaskDeckError as e:
            logger.error("Deleting task %s failed: %s", task_id, e)
            return MutationResult.failure(e)

        logger.info("Task %s deleted", task_id)
        await self.fetch_all()
        return MutationResult.success()

    async def update(self, task_id: int, patch: TaskPatch) -> MutationResult:
        """Send only the fields present in `patch`, then resync."""
        if patch.is_empty():
            return MutationResult.failure(ValidationError("Nothing to update."))
        if isinstance(patch.title, str) and not patch.title.strip():
            return MutationResult.failure(ValidationError("Task title is required."))

        try:
            await self._api.update_task(task_id, patch)
        except TaskDeckError as e:
            logger.error("Updating task %s failed: %s", task_id, e)
            return MutationResult.failure(e)

        logger.info("Task %s updated fields=%s", task_id, sorted(patch.to_payload()))
        await self.fetch_all()
        return MutationResult.success()
