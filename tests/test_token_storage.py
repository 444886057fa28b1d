# tests/test_token_storage.py

from __future__ import annotations

from pathlib import Path

from taskdeck.session.token_storage import FileTokenStorage


def test_round_trip_and_clear(tmp_path: Path) -> None:
    storage = FileTokenStorage(tmp_path / "nested" / "session.json")
    assert storage.load() is None

    storage.save("abc")
    assert storage.load() == "abc"
    assert FileTokenStorage(storage.path).load() == "abc"

    storage.clear()
    assert storage.load() is None
    storage.clear()  # idempotent


def test_garbage_file_reads_as_no_token(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text("not json", "utf-8")
    assert FileTokenStorage(path).load() is None

    path.write_text('{"token": ""}', "utf-8")
    assert FileTokenStorage(path).load() is None
