# src/taskdeck/tasks/task_view.py

"""
Filter/sort engine.

filter_and_sort() is a pure function of (tasks, criteria). Stages, in order:
1. tag filter       (criteria.tag_id is None -> all tags)
2. completion filter
3. text search      (case-insensitive substring of title OR description)
4. sort by due date ascending; undated tasks after all dated ones, input order kept

A task must pass 1-3 (conjunction) to appear; 4 only orders the survivors.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date

from .tag_cache import TagCache
from .task_cache import TaskCache
from .task_models import UNKNOWN_TAG_NAME, CompletionFilter, Tag, Task


@dataclass(slots=True, frozen=True)
class FilterCriteria:
    completion: CompletionFilter = CompletionFilter.ALL
    search: str = ""
    tag_id: int | None = None


def matches_tag(task: Task, tag_id: int | None) -> bool:
    return tag_id is None or tag_id in task.tag_ids


def matches_completion(task: Task, completion: CompletionFilter) -> bool:
    if completion is CompletionFilter.COMPLETED:
        return task.completed
    if completion is CompletionFilter.INCOMPLETE:
        return not task.completed
    return True


def matches_search(task: Task, search: str) -> bool:
    needle = search.casefold()
    if not needle:
        return True
    return needle in task.title.casefold() or needle in task.description.casefold()


def matches(task: Task, criteria: FilterCriteria) -> bool:
    return (
        matches_tag(task, criteria.tag_id)
        and matches_completion(task, criteria.completion)
        and matches_search(task, criteria.search)
    )


def due_sort_key(task: Task) -> tuple[bool, date]:
    # (False, d) < (True, ...) puts every dated task before every undated one.
    if task.due_date is None:
        return (True, date.max)
    return (False, task.due_date)


def filter_and_sort(tasks: Iterable[Task], criteria: FilterCriteria) -> list[Task]:
    # sorted() is stable: undated tasks keep their relative input order.
    return sorted((t for t in tasks if matches(t, criteria)), key=due_sort_key)


def resolve_tag_names(task: Task, tags: Sequence[Tag]) -> list[str]:
    """Tag names for a task, sorted by id; dangling ids resolve to "unknown tag"."""
    by_id = {tag.id: tag.name for tag in tags}
    return [by_id.get(tag_id, UNKNOWN_TAG_NAME) for tag_id in sorted(task.tag_ids)]


def format_task_line(task: Task, tags: Sequence[Tag]) -> str:
    mark = "x" if task.completed else " "
    due = task.due_date.isoformat() if task.due_date else "no due date"
    names = resolve_tag_names(task, tags)
    tag_str = ", ".join(names) if names else "none"
    line = f"[{mark}] #{task.id} {task.title}"
    if task.description:
        line += f" - {task.description}"
    return f"{line} (due: {due}; tags: {tag_str})"


class TaskView:
    """
    Holds the UI-scoped filter criteria and derives the visible task list on demand.

    Nothing is cached: visible_tasks() re-runs filter_and_sort on the caches'
    current contents each time.
    """

    def __init__(
        self,
        task_cache: TaskCache,
        tag_cache: TagCache,
        criteria: FilterCriteria | None = None,
    ) -> None:
        self._task_cache = task_cache
        self._tag_cache = tag_cache
        self.criteria = criteria or FilterCriteria()

    def set_completion(self, completion: CompletionFilter | str) -> None:
        self.criteria = replace(self.criteria, completion=CompletionFilter(completion))

    def set_search(self, search: str) -> None:
        self.criteria = replace(self.criteria, search=search or "")

    def select_tag(self, tag_id: int | None) -> None:
        self.criteria = replace(self.criteria, tag_id=tag_id)

    def reset(self) -> None:
        self.criteria = FilterCriteria()

    def visible_tasks(self) -> list[Task]:
        return filter_and_sort(self._task_cache.tasks, self.criteria)

    def render_lines(self) -> list[str]:
        tags = self._tag_cache.tags
        return [format_task_line(task, tags) for task in self.visible_tasks()]
