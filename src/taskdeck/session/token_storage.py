# src/taskdeck/session/token_storage.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class FileTokenStorage:
    """
    Durable single-key slot for the session token: a small JSON file {"token": "..."}.

    The file holds a credential and must never be committed (keep it under a gitignored dir).
    A missing, unreadable or malformed file reads as "no token".
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        try:
            raw = self._path.read_text("utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.warning("Failed to read token file %s", self._path, exc_info=True)
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Token file %s is not valid JSON; ignoring it.", self._path)
            return None

        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token.strip():
            return None
        return token

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps({"token": token}), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            # Not critical on Windows or restricted FS.
            os.chmod(self._path, 0o600)
        logger.debug("Session token saved to %s", self._path)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
            logger.debug("Session token removed from %s", self._path)


class MemoryTokenStorage:
    """In-process token slot (used when no durable location is wanted, e.g. tests)."""

    def __init__(self, token: str | None = None) -> None:
        self.token = token

    def load(self) -> str | None:
        return self.token

    def save(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None
