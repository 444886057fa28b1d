# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The session and the caches depend on Protocols instead of concrete implementations.
This keeps the HTTP client and the token storage swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

from ..tasks.task_models import NewTask, Tag, Task, TaskPatch

TokenProvider = Callable[[], str | None]


class TaskApi(Protocol):
    """Remote task service boundary (see api/client.py for the HTTP implementation)."""

    # Auth
    async def login(self, username: str, password: str) -> str: ...
    async def validate_token(self, token: str) -> None: ...

    # Tasks
    async def list_tasks(self) -> list[Task]: ...
    async def create_task(self, new_task: NewTask) -> Task: ...
    async def toggle_task(self, task_id: int) -> Task: ...
    async def update_task(self, task_id: int, patch: TaskPatch) -> Task: ...
    async def delete_task(self, task_id: int) -> None: ...

    # Tags
    async def list_tags(self) -> list[Tag]: ...
    async def create_tag(self, name: str) -> Tag: ...
    async def rename_tag(self, tag_id: int, name: str) -> Tag: ...
    async def delete_tag(self, tag_id: int) -> None: ...


class TokenStorage(Protocol):
    """Durable single-slot storage for the session token (survives restarts)."""

    def load(self) -> str | None: ...
    def save(self, token: str) -> None: ...
    def clear(self) -> None: ...
