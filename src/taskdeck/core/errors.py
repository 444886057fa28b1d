# src/taskdeck/core/errors.py

"""
Error taxonomy shared by the session, the caches and the API client.

- TransportError: the request never completed (connection refused, DNS, reset).
- AuthenticationError: login rejected or token invalid.
- ValidationError: a client-side precondition failed; no call was issued.
- RemoteRejectionError: non-2xx status, or a payload that does not parse.
"""

from __future__ import annotations

from dataclasses import dataclass


class TaskDeckError(Exception):
    """Base class for every error the client surfaces to its callers."""


class TransportError(TaskDeckError):
    pass


class AuthenticationError(TaskDeckError):
    pass


class ValidationError(TaskDeckError):
    pass


class RemoteRejectionError(TaskDeckError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True, frozen=True)
class MutationResult:
    """Outcome of a mutation that reports failures instead of raising them."""

    ok: bool
    error: TaskDeckError | None = None

    @property
    def message(self) -> str:
        if self.error is None:
            return ""
        return str(self.error) or self.error.__class__.__name__

    @classmethod
    def success(cls) -> MutationResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: TaskDeckError) -> MutationResult:
        return cls(ok=False, error=error)
