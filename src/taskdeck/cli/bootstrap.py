# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the HTTP client, token storage, session, caches, view and overdue monitor
  into AppState.
"""

from __future__ import annotations

import logging

import httpx

from ..api.client import TaskApiClient
from ..config import get_settings
from ..core.ports import TokenStorage
from ..core.state import AppState
from ..session.session_store import SessionStore
from ..session.token_storage import FileTokenStorage
from ..tasks.overdue import OverdueMonitor
from ..tasks.tag_cache import TagCache
from ..tasks.task_cache import TaskCache
from ..tasks.task_view import TaskView

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.token_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    storage: TokenStorage | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the storage/transport seams) injectable makes the app easy
    to test. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = FileTokenStorage(settings.token_path)

    api = TaskApiClient(settings.api_base_url, transport=transport)
    session = SessionStore(api, storage)
    # The client reads the token from the session at every call.
    api.set_token_provider(session.bearer_token)

    tasks = TaskCache(api)
    tags = TagCache(api)

    state = AppState(
        settings=settings,
        api=api,
        session=session,
        tasks=tasks,
        tags=tags,
        view=TaskView(tasks, tags),
        overdue=OverdueMonitor(tasks),
    )
    logger.debug("AppState created (api=%s)", settings.api_base_url)
    return state


async def start_session(state: AppState) -> bool:
    """Restore a persisted session and, if it is valid, populate both caches."""
    restored = await state.session.bootstrap_from_storage()
    if not restored:
        state.reset_session_data()
    if restored and getattr(state.settings, "fetch_on_start", True):
        await state.refresh_all()
    return restored
