# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.core.state import AppState
from taskdeck.session.session_store import SessionStore
from taskdeck.session.token_storage import MemoryTokenStorage
from taskdeck.tasks.overdue import OverdueMonitor
from taskdeck.tasks.tag_cache import TagCache
from taskdeck.tasks.task_cache import TaskCache
from taskdeck.tasks.task_models import Tag, Task
from taskdeck.tasks.task_view import TaskView

from .fakes import FakeTaskApi


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment / .env.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="DEBUG",
        api_base_url="http://testserver/api",
        console_enabled=False,
        fetch_on_start=True,
        data_dir=tmp_path,
        token_path=tmp_path / "session.json",
    )


@pytest.fixture()
def sample_tasks() -> list[Task]:
    return [
        Task(id=1, title="A", description="", completed=False, due_date=date(2025, 6, 20), tag_ids=frozenset({10})),
        Task(id=2, title="B", description="", completed=True, due_date=date(2025, 6, 18)),
        Task(id=3, title="C", description="write report", completed=False, tag_ids=frozenset({99})),
    ]


@pytest.fixture()
def sample_tags() -> list[Tag]:
    return [Tag(id=10, name="work"), Tag(id=11, name="home")]


@pytest.fixture()
def api(sample_tasks: list[Task], sample_tags: list[Tag]) -> FakeTaskApi:
    return FakeTaskApi(sample_tasks, sample_tags)


@pytest.fixture()
def state(settings: SimpleNamespace, api: FakeTaskApi) -> AppState:
    """AppState wired with the in-memory fake API and token slot."""
    session = SessionStore(api, MemoryTokenStorage())
    tasks = TaskCache(api)
    tags = TagCache(api)
    return AppState(
        settings=settings,
        api=api,
        session=session,
        tasks=tasks,
        tags=tags,
        view=TaskView(tasks, tags),
        overdue=OverdueMonitor(tasks),
    )
