# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any, Final

from ..core.errors import RemoteRejectionError

UNKNOWN_TAG_NAME: Final = "unknown tag"


class CompletionFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    @classmethod
    def parse(cls, raw: str | None) -> CompletionFilter:
        if not raw:
            return cls.ALL
        return cls(raw.strip().lower())


class _Unset:
    """Marker for "field not part of this patch" (None is a meaningful value for due_date)."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass(slots=True, frozen=True)
class Tag:
    id: int
    name: str


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    description: str
    completed: bool
    due_date: date | None = None
    tag_ids: frozenset[int] = field(default_factory=frozenset)


@dataclass(slots=True, frozen=True)
class NewTask:
    """Creation payload. The id is assigned by the service."""

    title: str
    description: str = ""
    completed: bool = False
    due_date: date | None = None
    tag_ids: tuple[int, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title.strip(),
            "description": self.description,
            "completed": self.completed,
        }
        if self.due_date is not None:
            payload["dueDate"] = self.due_date.isoformat()
        if self.tag_ids:
            payload["tagIds"] = list(self.tag_ids)
        return payload


@dataclass(slots=True, frozen=True)
class TaskPatch:
    """
    Partial update: only fields that were explicitly set are sent.

    due_date=None clears the due date; leaving it UNSET keeps it.
    """

    title: str | _Unset = UNSET
    description: str | _Unset = UNSET
    completed: bool | _Unset = UNSET
    due_date: date | None | _Unset = UNSET
    tag_ids: tuple[int, ...] | _Unset = UNSET

    def is_empty(self) -> bool:
        return not self.to_payload()

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if not isinstance(self.title, _Unset):
            payload["title"] = self.title.strip()
        if not isinstance(self.description, _Unset):
            payload["description"] = self.description
        if not isinstance(self.completed, _Unset):
            payload["completed"] = self.completed
        if not isinstance(self.due_date, _Unset):
            payload["dueDate"] = self.due_date.isoformat() if self.due_date is not None else None
        if not isinstance(self.tag_ids, _Unset):
            payload["tagIds"] = list(self.tag_ids)
        return payload


# ---- boundary parsing ----


def _require_int(data: dict[str, Any], key: str) -> int:
    val = data.get(key)
    # bool is an int subclass; a JSON true is not an id.
    if isinstance(val, bool) or not isinstance(val, int):
        raise RemoteRejectionError(f"Malformed payload: {key!r} must be an integer, got {val!r}")
    return val


def _require_str(
    data: dict[str, Any], key: str, *, allow_missing: bool = False, non_empty: bool = False
) -> str:
    val = data.get(key)
    if val is None and allow_missing:
        return ""
    if not isinstance(val, str):
        raise RemoteRejectionError(f"Malformed payload: {key!r} must be a string, got {val!r}")
    if non_empty and not val.strip():
        raise RemoteRejectionError(f"Malformed payload: {key!r} must not be empty")
    return val


def parse_due_date(raw: Any) -> date | None:
    """
    Parse an ISO-8601 calendar date.

    The service sometimes serializes a full datetime ("2025-06-20T00:00:00");
    only the calendar date part is kept.
    """
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise RemoteRejectionError(f"Malformed payload: 'dueDate' must be a string, got {raw!r}")
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError as e:
        raise RemoteRejectionError(f"Malformed payload: bad dueDate {raw!r}") from e


def task_from_json(data: Any) -> Task:
    if not isinstance(data, dict):
        raise RemoteRejectionError(f"Malformed payload: task must be an object, got {type(data).__name__}")

    completed = data.get("completed", False)
    if not isinstance(completed, bool):
        raise RemoteRejectionError(f"Malformed payload: 'completed' must be a boolean, got {completed!r}")

    raw_tag_ids = data.get("tagIds")
    if raw_tag_ids is None:
        tag_ids: frozenset[int] = frozenset()
    elif isinstance(raw_tag_ids, list) and all(
        isinstance(t, int) and not isinstance(t, bool) for t in raw_tag_ids
    ):
        tag_ids = frozenset(raw_tag_ids)
    else:
        raise RemoteRejectionError(f"Malformed payload: 'tagIds' must be a list of integers, got {raw_tag_ids!r}")

    return Task(
        id=_require_int(data, "id"),
        title=_require_str(data, "title", non_empty=True),
        description=_require_str(data, "description", allow_missing=True),
        completed=completed,
        due_date=parse_due_date(data.get("dueDate")),
        tag_ids=tag_ids,
    )


def tag_from_json(data: Any) -> Tag:
    if not isinstance(data, dict):
        raise RemoteRejectionError(f"Malformed payload: tag must be an object, got {type(data).__name__}")
    return Tag(id=_require_int(data, "id"), name=_require_str(data, "name", non_empty=True))


def _ensure_unique_ids(items: Iterable[Task] | Iterable[Tag], kind: str) -> None:
    seen: set[int] = set()
    for item in items:
        if item.id in seen:
            raise RemoteRejectionError(f"Malformed payload: duplicate {kind} id {item.id}")
        seen.add(item.id)


def tasks_from_json(data: Any) -> list[Task]:
    if not isinstance(data, list):
        raise RemoteRejectionError(f"Malformed payload: expected a task list, got {type(data).__name__}")
    tasks = [task_from_json(item) for item in data]
    _ensure_unique_ids(tasks, "task")
    return tasks


def tags_from_json(data: Any) -> list[Tag]:
    if not isinstance(data, list):
        raise RemoteRejectionError(f"Malformed payload: expected a tag list, got {type(data).__name__}")
    tags = [tag_from_json(item) for item in data]
    _ensure_unique_ids(tags, "tag")
    return tags
