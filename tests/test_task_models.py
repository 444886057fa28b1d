# tests/test_task_models.py

from __future__ import annotations

from datetime import date

import pytest

from taskdeck.core.errors import RemoteRejectionError
from taskdeck.tasks.task_models import (
    UNSET,
    CompletionFilter,
    NewTask,
    TaskPatch,
    parse_due_date,
    tag_from_json,
    task_from_json,
)


def test_task_from_json_defaults() -> None:
    task = task_from_json({"id": 3, "title": "T", "completed": True})
    assert task.description == ""
    assert task.due_date is None
    assert task.tag_ids == frozenset()


def test_due_date_accepts_datetime_strings() -> None:
    assert parse_due_date("2025-06-20T00:00:00") == date(2025, 6, 20)
    assert parse_due_date(None) is None
    assert parse_due_date("") is None


@pytest.mark.parametrize(
    "payload",
    [
        {"id": 1, "title": ""},
        {"id": 1, "title": "   "},
    ],
)
def test_blank_title_is_malformed(payload: dict) -> None:
    with pytest.raises(RemoteRejectionError):
        task_from_json(payload)


def test_blank_tag_name_is_malformed() -> None:
    with pytest.raises(RemoteRejectionError):
        tag_from_json({"id": 4, "name": ""})
    assert tag_from_json({"id": 4, "name": "work"}).name == "work"


def test_boolean_is_not_an_id() -> None:
    with pytest.raises(RemoteRejectionError):
        task_from_json({"id": True, "title": "T", "completed": False})


def test_new_task_payload_omits_empty_optionals() -> None:
    assert NewTask(title="T").to_payload() == {"title": "T", "description": "", "completed": False}
    payload = NewTask(title="T", due_date=date(2025, 1, 2), tag_ids=(1, 2)).to_payload()
    assert payload["dueDate"] == "2025-01-02"
    assert payload["tagIds"] == [1, 2]


def test_patch_payload_contains_only_set_fields() -> None:
    assert TaskPatch().to_payload() == {}
    assert TaskPatch().is_empty()
    assert TaskPatch(completed=False).to_payload() == {"completed": False}
    assert TaskPatch(tag_ids=()).to_payload() == {"tagIds": []}
    assert TaskPatch(due_date=None).to_payload() == {"dueDate": None}
    assert TaskPatch(description=UNSET).is_empty()


def test_completion_filter_parse() -> None:
    assert CompletionFilter.parse(None) is CompletionFilter.ALL
    assert CompletionFilter.parse(" Incomplete ") is CompletionFilter.INCOMPLETE
    with pytest.raises(ValueError):
        CompletionFilter.parse("later")
