# tests/test_commands.py

from __future__ import annotations

import pytest

from taskdeck.cli.commands import NOT_LOGGED_IN, CommandRegistry
from taskdeck.cli.commands import registry as commands
from taskdeck.core.errors import TransportError, ValidationError
from taskdeck.tasks.task_models import CompletionFilter


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    async def handler(state, args):
        called["a"] += 1
        return " ".join(args)

    reg.register("a", handler, "a", aliases=["x"])

    assert await reg.handle(state, "/a one two") == "one two"
    assert await reg.handle(state, "/X three") == "three"
    assert called["a"] == 2


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")


@pytest.mark.asyncio
async def test_command_errors_become_replies(state) -> None:
    reg = CommandRegistry()

    async def failing(state, args):
        raise ValidationError("bad input")

    reg.register("f", failing, "f")
    assert await reg.handle(state, "/f") == "bad input"


@pytest.mark.asyncio
async def test_auth_gated_commands(state) -> None:
    assert await commands.handle(state, "/list") == NOT_LOGGED_IN
    assert state.tasks.tasks == []


@pytest.mark.asyncio
async def test_login_fetches_and_lists(state, api) -> None:
    reply = await commands.handle(state, "/login alice secret")
    assert reply == "Logged in as alice."
    assert state.session.is_authenticated
    assert {"list_tasks", "list_tags"} <= set(api.call_names())

    listing = await commands.handle(state, "/list") or ""
    assert "#1 A" in listing
    assert "unknown tag" in listing  # task 3 references tag 99


@pytest.mark.asyncio
async def test_bad_login_is_reported(state) -> None:
    reply = await commands.handle(state, "/login alice nope")
    assert reply is not None and "rejected" in reply
    assert not state.session.is_authenticated


@pytest.mark.asyncio
async def test_add_edit_toggle_rm_flow(state, api) -> None:
    await commands.handle(state, "/login alice secret")

    reply = await commands.handle(state, "/add Buy milk | 2 litres | 2030-01-02 | 10")
    assert reply == "Task added: Buy milk"
    created = [t for t in state.tasks.tasks if t.title == "Buy milk"][0]
    assert created.due_date is not None and created.due_date.isoformat() == "2030-01-02"
    assert created.tag_ids == frozenset({10})

    reply = await commands.handle(state, f"/edit {created.id} title=Buy oat milk | due=none")
    assert reply == f"Task {created.id} updated."
    edited = state.tasks.get(created.id)
    assert edited is not None and edited.title == "Buy oat milk" and edited.due_date is None

    reply = await commands.handle(state, f"/toggle {created.id}")
    assert reply is not None and reply.startswith("[x]")

    reply = await commands.handle(state, f"/rm {created.id}")
    assert reply == f"Task {created.id} deleted."
    assert state.tasks.get(created.id) is None


@pytest.mark.asyncio
async def test_add_without_title_makes_no_call(state, api) -> None:
    await commands.handle(state, "/login alice secret")
    before = len(api.calls)
    reply = await commands.handle(state, "/add  | only a description")
    assert reply == "Task title is required."
    assert len(api.calls) == before


@pytest.mark.asyncio
async def test_filters_and_search(state) -> None:
    await commands.handle(state, "/login alice secret")

    listing = await commands.handle(state, "/filter incomplete") or ""
    assert "#1 A" in listing and "#2 B" not in listing

    await commands.handle(state, "/filter all")
    listing = await commands.handle(state, "/search b") or ""
    assert "#2 B" in listing and "#1 A" not in listing

    assert "Usage" in (await commands.handle(state, "/filter someday") or "")


@pytest.mark.asyncio
async def test_tag_commands(state) -> None:
    await commands.handle(state, "/login alice secret")

    reply = await commands.handle(state, "/tagadd errands") or ""
    assert "errands" in reply

    await commands.handle(state, "/tag 10")
    assert state.view.criteria.tag_id == 10

    await commands.handle(state, "/tagrm 10")
    assert state.view.criteria.tag_id is None
    assert state.tags.get(10) is None


@pytest.mark.asyncio
async def test_overdue_and_dismiss(state) -> None:
    await commands.handle(state, "/login alice secret")
    # sample task 1 is due 2025-06-20 and incomplete
    assert state.overdue.is_open
    assert "#1 A" in (await commands.handle(state, "/overdue") or "")

    await commands.handle(state, "/dismiss")
    assert not state.overdue.is_open


@pytest.mark.asyncio
async def test_logout_discards_previous_session_data(state) -> None:
    await commands.handle(state, "/login alice secret")
    await commands.handle(state, "/filter incomplete")
    assert state.overdue.is_open

    assert await commands.handle(state, "/logout") == "Logged out."

    assert state.tasks.tasks == [] and state.tags.tags == []
    assert not state.overdue.is_open and state.overdue.overdue == []
    assert state.view.criteria.completion is CompletionFilter.ALL
    for line in ("/filter all", "/search A", "/tag 10", "/overdue", "/dismiss"):
        assert await commands.handle(state, line) == NOT_LOGGED_IN


@pytest.mark.asyncio
async def test_add_reports_failed_resync(state, api) -> None:
    await commands.handle(state, "/login alice secret")
    api.fail_on["list_tasks"] = TransportError("down")

    reply = await commands.handle(state, "/add Buy milk") or ""
    assert reply.startswith("Task added: Buy milk")
    assert "Showing last known tasks." in reply
    assert "create_task" in api.call_names()
