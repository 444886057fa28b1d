# src/taskdeck/api/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import (
    AuthenticationError,
    RemoteRejectionError,
    TransportError,
)
from ..core.ports import TokenProvider
from ..tasks.task_models import (
    NewTask,
    Tag,
    Task,
    TaskPatch,
    tag_from_json,
    tags_from_json,
    task_from_json,
    tasks_from_json,
)

logger = logging.getLogger(__name__)

_AUTH_REJECT_STATUSES = {401, 403}


def _no_token() -> str | None:
    return None


def _bearer_headers(token: str | None) -> dict[str, str]:
    # No token -> no header at all; the service rejects unauthenticated calls itself.
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


class TaskApiClient:
    """
    HTTP implementation of the TaskApi port.

    - One httpx.AsyncClient per instance; call aclose() at shutdown.
    - No timeout: failures surface only through the transport's own errors.
    - The bearer token is read from token_provider at the moment each request is issued.
    - Every httpx exception is mapped onto the TaskDeckError taxonomy here,
      and every JSON body is parsed into typed models here.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_provider: TokenProvider = _no_token,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=None,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def set_token_provider(self, token_provider: TokenProvider) -> None:
        self._token_provider = token_provider

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers ----

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        token: str | None = None,
        use_session_token: bool = True,
    ) -> httpx.Response:
        if use_session_token:
            token = self._token_provider()
        headers = _bearer_headers(token)

        try:
            resp = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TransportError as e:
            logger.info("%s %s failed: %s", method, path, e.__class__.__name__)
            raise TransportError(f"Could not reach the task service ({e.__class__.__name__}).") from e

        if resp.is_success:
            logger.debug("%s %s -> %s", method, path, resp.status_code)
            return resp

        logger.info("%s %s rejected with status %s", method, path, resp.status_code)
        if path.startswith("/auth/") and resp.status_code in _AUTH_REJECT_STATUSES:
            raise AuthenticationError("Authentication rejected by the task service.")
        raise RemoteRejectionError(
            f"Task service rejected {method} {path} (HTTP {resp.status_code}).",
            status_code=resp.status_code,
        )

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteRejectionError(
                "Task service returned a body that is not JSON.",
                status_code=resp.status_code,
            ) from e

    # ---- auth ----

    async def login(self, username: str, password: str) -> str:
        resp = await self._request(
            "POST",
            "/auth/login",
            json={"username": username, "password": password},
            use_session_token=False,
        )
        data = self._json(resp)
        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token.strip():
            raise RemoteRejectionError("Login response did not contain a token.", status_code=resp.status_code)
        return token

    async def validate_token(self, token: str) -> None:
        await self._request("GET", "/auth/validate", token=token, use_session_token=False)

    # ---- tasks ----

    async def list_tasks(self) -> list[Task]:
        resp = await self._request("GET", "/tasks")
        return tasks_from_json(self._json(resp))

    async def create_task(self, new_task: NewTask) -> Task:
        resp = await self._request("POST", "/tasks", json=new_task.to_payload())
        return task_from_json(self._json(resp))

    async def toggle_task(self, task_id: int) -> Task:
        resp = await self._request("PUT", f"/tasks/{int(task_id)}/toggle")
        return task_from_json(self._json(resp))

    async def update_task(self, task_id: int, patch: TaskPatch) -> Task:
        resp = await self._request("PUT", f"/tasks/{int(task_id)}", json=patch.to_payload())
        return task_from_json(self._json(resp))

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/tasks/{int(task_id)}")

    # ---- tags ----

    async def list_tags(self) -> list[Tag]:
        resp = await self._request("GET", "/tags")
        return tags_from_json(self._json(resp))

    async def create_tag(self, name: str) -> Tag:
        resp = await self._request("POST", "/tags", json={"name": name})
        return tag_from_json(self._json(resp))

    async def rename_tag(self, tag_id: int, name: str) -> Tag:
        resp = await self._request("PUT", f"/tags/{int(tag_id)}", json={"name": name})
        return tag_from_json(self._json(resp))

    async def delete_tag(self, tag_id: int) -> None:
        await self._request("DELETE", f"/tags/{int(tag_id)}")

