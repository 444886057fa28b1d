# src/taskdeck/session/session_store.py

from __future__ import annotations

import logging

from ..core.errors import AuthenticationError, TaskDeckError, ValidationError
from ..core.ports import TaskApi, TokenStorage

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Bearer-token session with a two-state lifecycle.

        Unauthenticated -> (login ok | validation ok) -> Authenticated
        Authenticated   -> (logout | validation failure) -> Unauthenticated

    is_authenticated is only True after the service confirmed the token, either by
    issuing it (login) or by accepting it (validate). While bootstrap validation is
    in flight it stays False.
    """

    def __init__(self, api: TaskApi, storage: TokenStorage) -> None:
        self._api = api
        self._storage = storage
        self._token: str | None = None
        self._authenticated = False

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def bearer_token(self) -> str | None:
        """Token attached to outbound calls (read at call issuance)."""
        return self._token

    async def login(self, username: str, password: str) -> None:
        """
        Exchange credentials for a token.

        On failure the previous state is left untouched and AuthenticationError is
        raised; transport failures are reported the same way because the caller
        cannot act on the difference.
        """
        if not username.strip() or not password:
            raise ValidationError("Username and password are required.")

        try:
            token = await self._api.login(username, password)
        except AuthenticationError:
            logger.info("Login rejected for user=%s", username)
            raise
        except TaskDeckError as e:
            logger.info("Login failed for user=%s (%s)", username, e.__class__.__name__)
            raise AuthenticationError("Login failed.") from e

        self._storage.save(token)
        self._token = token
        self._authenticated = True
        logger.info("Logged in as user=%s", username)

    def logout(self) -> None:
        """Forget the token everywhere. Always succeeds; safe to call repeatedly."""
        try:
            self._storage.clear()
        except OSError:
            logger.exception("Failed to clear persisted session token.")
        was_authenticated = self._authenticated
        self._token = None
        self._authenticated = False
        if was_authenticated:
            logger.info("Logged out.")

    async def bootstrap_from_storage(self) -> bool:
        """
        Adopt a persisted token if the service still accepts it.

        No persisted token -> no network call. Any validation failure is treated as
        an explicit logout (never retried).
        """
        token = self._storage.load()
        if not token:
            logger.debug("No persisted session token.")
            return False

        try:
            await self._api.validate_token(token)
        except TaskDeckError as e:
            logger.info("Persisted session token rejected (%s); logging out.", e.__class__.__name__)
            self.logout()
            return False

        self._token = token
        self._authenticated = True
        logger.info("Session restored from persisted token.")
        return True
