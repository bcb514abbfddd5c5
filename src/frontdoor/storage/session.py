"""Admin session lifecycle for the record store.

:class:`AdminSessionProvider` hands out an authenticated
:class:`~frontdoor.storage.record_store.RecordStore` to the resolver and the
content fetchers.

Strategies
----------
TOKEN
    A pre-issued admin token is loaded into the store when the provider is
    constructed.  A missing token is a :class:`ConfigurationError` raised
    right there, at startup.

PASSWORD
    Nothing is loaded at startup.  The first caller that finds the store
    without a valid token logs in with the admin email / password.

State machine (password mode)
-----------------------------
::

    UNAUTHENTICATED ──get_session()──► AUTHENTICATING(task) ──ok──► AUTHENTICATED
          ▲                                   │                         │
          └───────────── failure ─────────────┘◄──── token expired ─────┘

While ``AUTHENTICATING``, every further caller awaits the *same* login task
instead of starting its own, and all of them observe its outcome.  On
failure the task handle is dropped so the next call may retry; the error is
raised to everyone who was waiting.

No store URL
------------
When no store is configured :meth:`AdminSessionProvider.get_session` returns
``None``; callers treat that as "store not configured".
"""

from __future__ import annotations

import asyncio
from enum import StrEnum
import logging
from typing import TYPE_CHECKING

from frontdoor.core.exceptions import ConfigurationError
from frontdoor.core.types import AuthMode

if TYPE_CHECKING:
    from frontdoor.core.config import FrontdoorConfig
    from frontdoor.storage.record_store import RecordStore

logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class AdminSessionProvider:
    """Lazily establishes and caches the admin session to the record store.

    Args:
        store: The record store, or ``None`` when no store URL is configured.
        mode: Token or password strategy.
        token: Admin token (token mode).
        email: Admin identity (password mode).
        password: Admin password (password mode).

    Raises:
        ConfigurationError: In token mode, when a store is given but no token.
    """

    def __init__(
        self,
        store: RecordStore | None,
        mode: AuthMode = AuthMode.PASSWORD,
        token: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> None:
        self._store = store
        self._mode = mode
        self._email = email
        self._password = password
        self._pending: asyncio.Task[None] | None = None
        self._state = SessionState.UNAUTHENTICATED

        if store is not None and mode == AuthMode.TOKEN:
            if not token:
                raise ConfigurationError(
                    parameter="admin_token",
                    reason="token mode requires a pre-issued admin token",
                )
            store.load_token(token)
            self._state = SessionState.AUTHENTICATED
            logger.info("Admin session loaded from static token")

    @classmethod
    def from_config(
        cls,
        config: FrontdoorConfig,
        store: RecordStore | None,
    ) -> AdminSessionProvider:
        return cls(
            store,
            mode=config.auth_mode,
            token=config.admin_token,
            email=config.admin_email,
            password=config.admin_password,
        )

    @property
    def configured(self) -> bool:
        return self._store is not None

    @property
    def mode(self) -> AuthMode:
        return self._mode

    @property
    def state(self) -> SessionState:
        if self._pending is not None:
            return SessionState.AUTHENTICATING
        if self._state == SessionState.AUTHENTICATED and self._store is not None:
            if self._mode == AuthMode.PASSWORD and not self._store.is_authenticated:
                return SessionState.UNAUTHENTICATED
        return self._state

    async def get_session(self) -> RecordStore | None:
        """Return the authenticated store, logging in first if needed.

        Returns:
            The store, or ``None`` when no store is configured.

        Raises:
            ConfigurationError: Password mode without email / password.
            AuthenticationError: The store rejected the credentials.
            StoreUnavailableError: The store could not be reached.
        """
        store = self._store
        if store is None:
            return None

        # Static tokens are never refreshed; an expired one fails downstream.
        if self._mode == AuthMode.TOKEN or store.is_authenticated:
            return store

        if not self._email or not self._password:
            raise ConfigurationError(
                parameter="admin_email/admin_password",
                reason="password mode requires admin email and password",
            )

        if self._pending is None:
            self._state = SessionState.AUTHENTICATING
            self._pending = asyncio.create_task(
                self._authenticate(store, self._email, self._password)
            )
            self._pending.add_done_callback(self._on_done)

        # Shield so a cancelled caller does not cancel the shared login.
        await asyncio.shield(self._pending)
        return store

    async def _authenticate(self, store: RecordStore, email: str, password: str) -> None:
        logger.info("Authenticating admin session")
        await store.authenticate_admin(email, password)
        logger.info("Admin session established")

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._pending = None
        if task.cancelled():
            self._state = SessionState.UNAUTHENTICATED
            return
        exc = task.exception()
        if exc is not None:
            self._state = SessionState.UNAUTHENTICATED
            logger.warning("Admin authentication failed: %s", exc)
            return
        self._state = SessionState.AUTHENTICATED

    def invalidate(self) -> None:
        """Forget the current token so the next call logs in again."""
        if self._store is not None and self._mode == AuthMode.PASSWORD:
            self._store.clear_token()
            self._state = SessionState.UNAUTHENTICATED


__all__ = ["AdminSessionProvider", "SessionState"]
