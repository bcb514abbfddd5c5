"""Abstract record-store interface — the data-store boundary.

``RecordStore`` is everything frontdoor needs from the external record
store: filtered queries, paging, admin authentication and a handful of
writes for seeding.  The resolver and the content fetchers depend only on
this interface, so the HTTP client (:mod:`frontdoor.storage.pocketbase`) and
the in-process store (:mod:`frontdoor.storage.memory`) are interchangeable.

Contract
--------
- **Fully async** — every I/O method is a coroutine.
- **Raise on not-found** — :meth:`find_first` raises
  :class:`~frontdoor.core.exceptions.RecordNotFoundError`; it never returns
  ``None``.
- **Wrap failures** — backend errors surface as
  :class:`~frontdoor.core.exceptions.StoreError` subclasses, never as raw
  transport exceptions.
- **One auth slot** — a store holds at most one admin token at a time.
  :meth:`authenticate_admin` and :meth:`load_token` replace it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import TYPE_CHECKING, Any

from frontdoor.utils.security import token_expired

if TYPE_CHECKING:
    from frontdoor.core.types import AdminAuth, RecordPage

logger = logging.getLogger(__name__)

#: Page size used by :meth:`RecordStore.full_list` when walking all pages.
FULL_LIST_BATCH = 500


class RecordStore(ABC):
    """Abstract base class for record-store backends."""

    def __init__(self) -> None:
        self._auth_token: str | None = None

    ##################
    # Authentication #
    ##################

    @property
    def auth_token(self) -> str | None:
        return self._auth_token

    @property
    def is_authenticated(self) -> bool:
        """``True`` when a token is loaded and has not expired."""
        return not token_expired(self._auth_token)

    def load_token(self, token: str) -> None:
        """Install a pre-issued admin token.  No network call is made."""
        self._auth_token = token

    def clear_token(self) -> None:
        self._auth_token = None

    @abstractmethod
    async def authenticate_admin(self, email: str, password: str) -> AdminAuth:
        """Exchange admin credentials for a token and install it.

        Raises:
            AuthenticationError: When the store rejects the credentials.
            StoreUnavailableError: When the store cannot be reached.
        """

    ###########
    # Queries #
    ###########

    @abstractmethod
    async def find_first(
        self,
        collection: str,
        filter: str,  # noqa: A002
        *,
        expand: str | None = None,
    ) -> dict[str, Any]:
        """Return the first record in *collection* matching *filter*.

        Args:
            collection: Collection name.
            filter: Filter expression (see :mod:`frontdoor.utils.filters`).
            expand: Comma-separated relation fields to load alongside the
                record under its ``expand`` key.

        Raises:
            RecordNotFoundError: When nothing matches.
            StoreError: On any other failure.
        """

    @abstractmethod
    async def list(
        self,
        collection: str,
        page: int = 1,
        per_page: int = 30,
        *,
        filter: str | None = None,  # noqa: A002
        sort: str | None = None,
        expand: str | None = None,
    ) -> RecordPage:
        """Return one page of records.

        Args:
            collection: Collection name.
            page: 1-based page number.
            per_page: Page size.
            filter: Optional filter expression.
            sort: Comma-separated field list; ``-`` prefix sorts descending.
            expand: Relation fields to expand.
        """

    async def full_list(
        self,
        collection: str,
        *,
        filter: str | None = None,  # noqa: A002
        sort: str | None = None,
        batch: int = FULL_LIST_BATCH,
    ) -> list[dict[str, Any]]:
        """Return every matching record by walking pages of *batch* records."""
        records: list[dict[str, Any]] = []
        page = 1
        while True:
            result = await self.list(collection, page, batch, filter=filter, sort=sort)
            records.extend(result.items)
            if len(result.items) < batch:
                return records
            page += 1

    ##########
    # Writes #
    ##########

    @abstractmethod
    async def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a record and return it as stored."""

    @abstractmethod
    async def update(
        self,
        collection: str,
        record_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        """Patch a record and return it as stored.

        Raises:
            RecordNotFoundError: When *record_id* does not exist.
        """

    #############
    # Lifecycle #
    #############

    async def close(self) -> None:  # noqa: B027
        """Release held resources.  No-op unless overridden."""


__all__ = ["FULL_LIST_BATCH", "RecordStore"]
