# src/taskdeck/tasks/tag_cache.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.errors import TaskDeckError, ValidationError
from ..core.ports import TaskApi
from .task_models import UNKNOWN_TAG_NAME, Tag

logger = logging.getLogger(__name__)

TagListener = Callable[[list[Tag]], None]

FETCH_ERROR_MESSAGE = "Failed to load tags."


class TagCache:
    """
    Local copy of the remote tag set.

    Same confirm-then-resync policy as TaskCache. Tag mutations let remote errors
    propagate to the caller; only empty names are rejected locally.
    """

    def __init__(self, api: TaskApi) -> None:
        self._api = api
        self._tags: list[Tag] = []
        self._listeners: list[TagListener] = []
        self.loading = False
        self.error = ""

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    def get(self, tag_id: int) -> Tag | None:
        for tag in self._tags:
            if tag.id == tag_id:
                return tag
        return None

    def name_for(self, tag_id: int) -> str:
        tag = self.get(tag_id)
        return tag.name if tag is not None else UNKNOWN_TAG_NAME

    def add_listener(self, listener: TagListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        snapshot = self.tags
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Tag cache listener failed: %r", listener)

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Tag name is required.")
        return cleaned

    def clear(self) -> None:
        self._tags = []
        self.error = ""
        self._notify()

    async def fetch_all(self) -> bool:
        self.loading = True
        try:
            tags = await self._api.list_tags()
        except TaskDeckError as e:
            logger.warning("Tag fetch failed: %s", e)
            self.error = FETCH_ERROR_MESSAGE
            return False
        finally:
            self.loading = False

        self._tags = tags
        self.error = ""
        logger.debug("Tag cache replaced: %d tags", len(tags))
        self._notify()
        return True

    async def add(self, name: str) -> None:
        cleaned = self._clean_name(name)
        await self._api.create_tag(cleaned)
        logger.info("Tag created name=%r", cleaned)
        await self.fetch_all()

    async def rename(self, tag_id: int, name: str) -> None:
        cleaned = self._clean_name(name)
        await self._api.rename_tag(tag_id, cleaned)
        logger.info("Tag %s renamed to %r", tag_id, cleaned)
        await self.fetch_all()

    async def delete(self, tag_id: int) -> None:
        await self._api.delete_tag(tag_id)
        logger.info("Tag %s deleted", tag_id)
        await self.fetch_all()
