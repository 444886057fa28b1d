# src/taskdeck/core/state.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..session.session_store import SessionStore
from ..tasks.overdue import OverdueMonitor
from ..tasks.tag_cache import TagCache
from ..tasks.task_cache import TaskCache
from ..tasks.task_view import TaskView
from .ports import TaskApi

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Everything the front-end needs, owned in one place.

    Created by cli.bootstrap.create_initial_state() at startup and released with
    aclose() at shutdown; nothing here is reached through module globals.
    """

    settings: Any
    api: TaskApi
    session: SessionStore
    tasks: TaskCache
    tags: TagCache
    view: TaskView
    overdue: OverdueMonitor

    async def refresh_all(self) -> bool:
        """Fetch tasks and tags (independently; one failing does not skip the other)."""
        tasks_ok = await self.tasks.fetch_all()
        tags_ok = await self.tags.fetch_all()
        return tasks_ok and tags_ok

    def reset_session_data(self) -> None:
        """Discard everything fetched under the previous session."""
        self.tasks.clear()
        self.tags.clear()
        self.view.reset()
        # After clear(): the cache notification recomputes an empty list but never closes the alert.
        self.overdue.reset()

    def logout(self) -> None:
        self.session.logout()
        self.reset_session_data()

    async def aclose(self) -> None:
        close = getattr(self.api, "aclose", None)
        if close is None:
            return
        try:
            await close()
        except Exception:
            logger.debug("API client close failed.", exc_info=True)
