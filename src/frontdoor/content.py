"""Read-only content queries for a resolved site.

Both fetchers degrade instead of failing: when the store is not configured,
the session cannot be established, or the query errors, they return an
empty sequence.  At this layer a failure is indistinguishable from a site
that genuinely has no rows; the failure is logged.

:meth:`ContentService.site_content` issues both queries concurrently and
joins them before returning.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from frontdoor.core.exceptions import FrontdoorError
from frontdoor.core.types import CategoryRecord, ItemRecord, SiteContent
from frontdoor.utils import filters

if TYPE_CHECKING:
    from frontdoor.storage.session import AdminSessionProvider

logger = logging.getLogger(__name__)

CATEGORIES_COLLECTION = "categories"
ITEMS_COLLECTION = "items"
DEFAULT_LATEST_ITEMS = 10


class ContentService:
    """Fetch categories and latest items for a site.

    Args:
        sessions: Source of the authenticated record store.
        latest_items_limit: Default page size for :meth:`latest_items`.
    """

    def __init__(
        self,
        sessions: AdminSessionProvider,
        latest_items_limit: int = DEFAULT_LATEST_ITEMS,
    ) -> None:
        self._sessions = sessions
        self._latest_items_limit = latest_items_limit

    async def categories(self, site_id: str) -> list[CategoryRecord]:
        """All categories of *site_id*, sorted by name ascending."""
        if not site_id:
            return []
        try:
            store = await self._sessions.get_session()
            if store is None:
                return []
            records = await store.full_list(
                CATEGORIES_COLLECTION,
                filter=filters.eq("site", site_id),
                sort="name",
            )
            return [CategoryRecord.model_validate(r) for r in records]
        except (FrontdoorError, ValidationError) as exc:
            logger.warning("Category fetch failed site_id=%s: %s", site_id, exc)
            return []

    async def latest_items(self, site_id: str, limit: int | None = None) -> list[ItemRecord]:
        """The *limit* most recently created items of *site_id*, newest first.

        Only the first page is fetched; no cursor is exposed.

        Raises:
            ValueError: *limit* (or the configured default) is below 1.
        """
        if not site_id:
            return []
        per_page = limit if limit is not None else self._latest_items_limit
        if per_page < 1:
            msg = f"limit must be >= 1, got {per_page}"
            raise ValueError(msg)
        try:
            store = await self._sessions.get_session()
            if store is None:
                return []
            page = await store.list(
                ITEMS_COLLECTION,
                1,
                per_page,
                filter=filters.eq("site", site_id),
                sort="-created",
            )
            return [ItemRecord.model_validate(r) for r in page.items]
        except (FrontdoorError, ValidationError) as exc:
            logger.warning("Item fetch failed site_id=%s: %s", site_id, exc)
            return []

    async def site_content(self, site_id: str, limit: int | None = None) -> SiteContent:
        """Fetch categories and latest items concurrently."""
        categories, items = await asyncio.gather(
            self.categories(site_id),
            self.latest_items(site_id, limit),
        )
        return SiteContent(categories=tuple(categories), items=tuple(items))


__all__ = [
    "CATEGORIES_COLLECTION",
    "DEFAULT_LATEST_ITEMS",
    "ITEMS_COLLECTION",
    "ContentService",
]
