"""``FrontdoorManager`` — wires the front door's components together.

The manager owns one instance of each process-wide component:

* the record store (``None`` when no store URL is configured),
* the admin session provider,
* the host resolution cache,
* the host → tenant resolver,
* the content service.

and exposes a FastAPI lifespan that releases them on shutdown.

Typical setup::

    from fastapi import FastAPI
    from frontdoor import FrontdoorConfig, FrontdoorManager
    from frontdoor.middleware.frontdoor import HostRoutingMiddleware

    config = FrontdoorConfig()
    manager = FrontdoorManager(config)

    app = FastAPI(lifespan=manager.create_lifespan())
    app.add_middleware(HostRoutingMiddleware, manager=manager)

In-process store (tests, local demos)::

    from frontdoor.storage.memory import InMemoryRecordStore

    store = InMemoryRecordStore(admins={"admin@example.com": "secret"})
    manager = FrontdoorManager(config, store=store)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from frontdoor.cache.host_cache import HostCache
from frontdoor.content import ContentService
from frontdoor.resolution.resolver import HostTenantResolver
from frontdoor.storage.pocketbase import PocketBaseStore
from frontdoor.storage.session import AdminSessionProvider

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from frontdoor.core.config import FrontdoorConfig
    from frontdoor.storage.record_store import RecordStore

logger = logging.getLogger(__name__)


class FrontdoorManager:
    """Central orchestrator for host routing and content access.

    Args:
        config: Front door settings.
        store: Record store to use instead of the one built from
            ``config.store_url``.

    Raises:
        ConfigurationError: Token mode without a token.
    """

    def __init__(
        self,
        config: FrontdoorConfig,
        store: RecordStore | None = None,
    ) -> None:
        self.config = config
        self.store: RecordStore | None = (
            store if store is not None else PocketBaseStore.from_config(config)
        )
        self.sessions = AdminSessionProvider.from_config(config, self.store)
        self.cache = HostCache(
            ttl=config.host_cache_ttl,
            max_size=config.host_cache_max_size,
        )
        self.resolver = HostTenantResolver(
            self.sessions,
            self.cache,
            require_servable_status=config.is_production,
        )
        self.content = ContentService(
            self.sessions,
            latest_items_limit=config.latest_items_limit,
        )
        self._initialized = False

    @property
    def root_host(self) -> str:
        return self.config.root_host

    def is_root_host(self, host: str | None) -> bool:
        """``True`` when *host* is the platform's own domain."""
        return host is not None and host == self.root_host

    async def initialize(self) -> None:
        """Log the effective configuration.

        Authentication stays lazy: the first request that needs the store
        performs it, so a store outage does not prevent startup.
        """
        if self._initialized:
            return
        if self.store is None:
            logger.warning("No store URL configured; tenant resolution is disabled")
        logger.info(
            "FrontdoorManager initialised environment=%s root_host=%s auth_mode=%s",
            self.config.environment,
            self.root_host,
            self.sessions.mode,
        )
        self._initialized = True

    async def close(self) -> None:
        """Close the store client and drop cached resolutions."""
        if self.store is not None:
            await self.store.close()
        dropped = self.cache.clear()
        logger.info("FrontdoorManager closed (cache entries dropped=%d)", dropped)
        self._initialized = False

    ############################
    # FastAPI lifespan helper #
    ############################

    def create_lifespan(self) -> Any:
        """Return an async context manager for FastAPI's ``lifespan`` parameter.

        Example::

            app = FastAPI(lifespan=manager.create_lifespan())
        """
        from contextlib import asynccontextmanager  # noqa: PLC0415

        @asynccontextmanager
        async def _lifespan(app: Any) -> AsyncIterator[None]:
            await self.initialize()
            try:
                yield
            finally:
                await self.close()

        return _lifespan


__all__ = ["FrontdoorManager"]
