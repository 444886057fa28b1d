# src/taskdeck/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date

from ..core.errors import TaskDeckError, ValidationError
from ..core.state import AppState
from ..tasks.task_models import UNSET, CompletionFilter, NewTask, TaskPatch
from ..tasks.task_view import format_task_line

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = "Not logged in. Use /login <username> <password>."


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._needs_auth: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        needs_auth: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in [key, *(a.lower() for a in aliases)]:
            self._handlers[alias] = handler
            if needs_auth:
                self._needs_auth.add(alias)

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        TaskDeckError from a handler becomes the reply text; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if name in self._needs_auth and not state.session.is_authenticated:
            return NOT_LOGGED_IN

        try:
            return await handler(state, args)
        except TaskDeckError as e:
            logger.debug("Command /%s failed: %s", name, e)
            return str(e) or e.__class__.__name__

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _parse_id(raw: str, what: str = "id") -> int:
    try:
        return int(raw.lstrip("#"))
    except ValueError as e:
        raise ValidationError(f"Invalid {what}: {raw!r}") from e


def _parse_date(raw: str) -> date | None:
    raw = raw.strip()
    if raw.lower() in ("", "none", "-"):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid date {raw!r} (expected YYYY-MM-DD).") from e


def _parse_tag_ids(raw: str) -> tuple[int, ...]:
    parts = [p for p in raw.replace(",", " ").split() if p]
    return tuple(_parse_id(p, "tag id") for p in parts)


def _parse_bool(raw: str) -> bool:
    val = raw.strip().lower()
    if val in ("1", "true", "yes", "y", "on", "done"):
        return True
    if val in ("0", "false", "no", "n", "off", "open"):
        return False
    raise ValidationError(f"Invalid yes/no value: {raw!r}")


def _segments(args: list[str]) -> list[str]:
    return [s.strip() for s in " ".join(args).split("|")]


def _task_list(state: AppState) -> str:
    if state.tasks.loading:
        return "Loading..."
    lines = state.view.render_lines()
    header = (
        f"Tasks (filter={state.view.criteria.completion.value}"
        f", search={state.view.criteria.search!r}"
        f", tag={'all' if state.view.criteria.tag_id is None else state.view.criteria.tag_id}):"
    )
    if state.tasks.error:
        header = f"{state.tasks.error} Showing last known tasks.\n{header}"
    if not lines:
        return f"{header}\n  (no tasks)"
    return header + "\n" + "\n".join(f"  {line}" for line in lines)


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    auth = "yes" if state.session.is_authenticated else "no"
    return (
        "Status:\n"
        f"  Service: {getattr(state.settings, 'api_base_url', '?')}\n"
        f"  Logged in: {auth}\n"
        f"  Tasks cached: {len(state.tasks.tasks)}\n"
        f"  Tags cached: {len(state.tags.tags)}"
    )


async def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <username> <password>"
    await state.session.login(args[0], args[1])
    await state.refresh_all()
    return f"Logged in as {args[0]}."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    state.logout()
    return "Logged out."


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    if await state.refresh_all():
        return _task_list(state)
    errors = " ".join(e for e in (state.tasks.error, state.tags.error) if e)
    return f"{errors} Showing last known data.\n" + _task_list(state)


async def cmd_list(state: AppState, args: list[str]) -> str:
    return _task_list(state)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [| description] [| YYYY-MM-DD] [| tag ids]"""
    segs = _segments(args) + ["", "", "", ""]
    new_task = NewTask(
        title=segs[0],
        description=segs[1],
        due_date=_parse_date(segs[2]),
        tag_ids=_parse_tag_ids(segs[3]),
    )
    await state.tasks.add(new_task)
    reply = f"Task added: {new_task.title.strip()}"
    if state.tasks.error:
        reply += f"\n{state.tasks.error} Showing last known tasks."
    return reply


async def cmd_toggle(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /toggle <id>"
    task_id = _parse_id(args[0])
    result = await state.tasks.toggle_completion(task_id)
    if not result.ok:
        return f"Failed to toggle task {task_id}: {result.message}"
    task = state.tasks.get(task_id)
    if task is None:
        return f"Task {task_id} toggled."
    return format_task_line(task, state.tags.tags)


_EDIT_KEYS = {"title", "desc", "description", "due", "tags", "done"}


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> title=... | desc=... | due=YYYY-MM-DD|none | tags=1,2 | done=yes|no"""
    if len(args) < 2:
        return "Usage: /edit <id> title=... | desc=... | due=YYYY-MM-DD|none | tags=1,2 | done=yes|no"
    task_id = _parse_id(args[0])

    fields: dict[str, str] = {}
    for seg in _segments(args[1:]):
        if not seg:
            continue
        key, sep, value = seg.partition("=")
        key = key.strip().lower()
        if not sep or key not in _EDIT_KEYS:
            raise ValidationError(f"Unknown edit field: {seg!r}")
        fields[key] = value.strip()

    desc = fields.get("description", fields.get("desc"))
    patch = TaskPatch(
        title=fields["title"] if "title" in fields else UNSET,
        description=desc if desc is not None else UNSET,
        completed=_parse_bool(fields["done"]) if "done" in fields else UNSET,
        due_date=_parse_date(fields["due"]) if "due" in fields else UNSET,
        tag_ids=_parse_tag_ids(fields["tags"]) if "tags" in fields else UNSET,
    )
    result = await state.tasks.update(task_id, patch)
    if not result.ok:
        return f"Failed to update task {task_id}: {result.message}"
    return f"Task {task_id} updated."


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <id>"
    task_id = _parse_id(args[0])
    result = await state.tasks.delete(task_id)
    if not result.ok:
        return f"Failed to delete task {task_id}: {result.message}"
    return f"Task {task_id} deleted."


async def cmd_filter(state: AppState, args: list[str]) -> str:
    try:
        completion = CompletionFilter.parse(args[0] if args else None)
    except ValueError:
        return "Usage: /filter all|completed|incomplete"
    state.view.set_completion(completion)
    return _task_list(state)


async def cmd_search(state: AppState, args: list[str]) -> str:
    state.view.set_search(" ".join(args))
    return _task_list(state)


async def cmd_tag(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() == "all":
        state.view.select_tag(None)
    else:
        state.view.select_tag(_parse_id(args[0], "tag id"))
    return _task_list(state)


async def cmd_tags(state: AppState, args: list[str]) -> str:
    tags = state.tags.tags
    if state.tags.error:
        prefix = f"{state.tags.error} Showing last known tags.\n"
    else:
        prefix = ""
    if not tags:
        return prefix + "No tags."
    selected = state.view.criteria.tag_id
    lines = [f"{'*' if t.id == selected else ' '} #{t.id} {t.name}" for t in tags]
    return prefix + "Tags:\n" + "\n".join(lines)


async def cmd_tagadd(state: AppState, args: list[str]) -> str:
    await state.tags.add(" ".join(args))
    return await cmd_tags(state, [])


async def cmd_tagrename(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /tagrename <id> <name>"
    await state.tags.rename(_parse_id(args[0], "tag id"), " ".join(args[1:]))
    return await cmd_tags(state, [])


async def cmd_tagrm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /tagrm <id>"
    tag_id = _parse_id(args[0], "tag id")
    await state.tags.delete(tag_id)
    if state.view.criteria.tag_id == tag_id:
        state.view.select_tag(None)
    return await cmd_tags(state, [])


def format_overdue_alert(state: AppState) -> str:
    tasks = state.overdue.overdue
    if not tasks:
        return "No overdue tasks."
    tags = state.tags.tags
    lines = [f"Overdue tasks ({len(tasks)}):"]
    lines.extend(f"  {format_task_line(t, tags)}" for t in tasks)
    lines.append("Use /dismiss to close this alert.")
    return "\n".join(lines)


async def cmd_overdue(state: AppState, args: list[str]) -> str:
    return format_overdue_alert(state)


async def cmd_dismiss(state: AppState, args: list[str]) -> str:
    state.overdue.dismiss()
    return "Overdue alert dismissed."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show connection and cache status.")
registry.register("login", cmd_login, help_text="Log in: /login <username> <password>.")
registry.register("logout", cmd_logout, help_text="Log out and forget the stored token.")
registry.register("refresh", cmd_refresh, help_text="Re-fetch tasks and tags.", needs_auth=True)
registry.register("list", cmd_list, help_text="Show tasks with the active filters.", aliases=["ls"], needs_auth=True)
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [| description] [| YYYY-MM-DD] [| tag ids].",
    needs_auth=True,
)
registry.register("toggle", cmd_toggle, help_text="Toggle completion: /toggle <id>.", needs_auth=True)
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <id> title=... | desc=... | due=... | tags=... | done=...",
    needs_auth=True,
)
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del"], needs_auth=True)
registry.register(
    "filter",
    cmd_filter,
    help_text="Completion filter: /filter all|completed|incomplete.",
    needs_auth=True,
)
registry.register(
    "search",
    cmd_search,
    help_text="Search title/description: /search <text> (empty clears).",
    needs_auth=True,
)
registry.register("tag", cmd_tag, help_text="Filter by tag: /tag <id> | /tag all.", needs_auth=True)
registry.register("tags", cmd_tags, help_text="List tags.", needs_auth=True)
registry.register("tagadd", cmd_tagadd, help_text="Add a tag: /tagadd <name>.", needs_auth=True)
registry.register("tagrename", cmd_tagrename, help_text="Rename a tag: /tagrename <id> <name>.", needs_auth=True)
registry.register("tagrm", cmd_tagrm, help_text="Delete a tag: /tagrm <id>.", needs_auth=True)
registry.register("overdue", cmd_overdue, help_text="Show overdue tasks.", needs_auth=True)
registry.register("dismiss", cmd_dismiss, help_text="Dismiss the overdue alert.", needs_auth=True)
