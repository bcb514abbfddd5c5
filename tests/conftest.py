"""Shared pytest fixtures for the frontdoor test suite.

Hierarchy
---------
mem_store               fresh InMemoryRecordStore with one admin account
seeded                  demo tenant (site 1dun, domains 1dun.co / 1dun.net) in mem_store
config                  FrontdoorConfig in password mode, root domain localhost:3000
sessions                AdminSessionProvider over mem_store
cache                   HostCache with the default 60 s TTL
resolver                HostTenantResolver over sessions + cache
manager                 FrontdoorManager over mem_store
app                     full FastAPI application from create_app()
http_client             httpx.AsyncClient → app, Host: 1dun.co
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from httpx import ASGITransport, AsyncClient
import pytest
import pytest_asyncio

from frontdoor.app import create_app
from frontdoor.cache.host_cache import HostCache
from frontdoor.core.config import FrontdoorConfig
from frontdoor.manager import FrontdoorManager
from frontdoor.resolution.resolver import HostTenantResolver
from frontdoor.seed import seed_demo_site
from frontdoor.storage.memory import InMemoryRecordStore
from frontdoor.storage.session import AdminSessionProvider

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"  # noqa: S105
STORE_URL = "http://store.test"


###################
# In-memory store #
###################


@pytest.fixture
def mem_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(admins={ADMIN_EMAIL: ADMIN_PASSWORD})


@pytest_asyncio.fixture
async def seeded(mem_store: InMemoryRecordStore) -> dict[str, Any]:
    """Seed the demo tenant, then drop the token so tests start logged out."""
    await mem_store.authenticate_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    ids = await seed_demo_site(mem_store)
    mem_store.clear_token()
    return ids


##########
# Config #
##########


@pytest.fixture
def config() -> FrontdoorConfig:
    return FrontdoorConfig(
        _env_file=None,
        store_url=STORE_URL,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        root_domain="localhost:3000",
    )


##############
# Components #
##############


@pytest.fixture
def sessions(mem_store: InMemoryRecordStore) -> AdminSessionProvider:
    return AdminSessionProvider(mem_store, email=ADMIN_EMAIL, password=ADMIN_PASSWORD)


@pytest.fixture
def cache() -> HostCache:
    return HostCache(ttl=60)


@pytest.fixture
def resolver(sessions: AdminSessionProvider, cache: HostCache) -> HostTenantResolver:
    return HostTenantResolver(sessions, cache)


###########
# Manager #
###########


@pytest_asyncio.fixture
async def manager(
    config: FrontdoorConfig,
    mem_store: InMemoryRecordStore,
) -> AsyncIterator[FrontdoorManager]:
    m = FrontdoorManager(config, store=mem_store)
    await m.initialize()
    yield m
    await m.close()


##########################
# ASGI app + HTTP client #
##########################


@pytest.fixture
def app(manager: FrontdoorManager) -> FastAPI:
    return create_app(manager=manager)


@pytest_asyncio.fixture
async def http_client(app: FastAPI, seeded: dict[str, Any]) -> AsyncIterator[AsyncClient]:
    """Return an AsyncClient addressed to the seeded tenant's first domain."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
        headers={"Host": "1dun.co"},
    ) as client:
        yield client


@pytest_asyncio.fixture
async def admin_store(
    mem_store: InMemoryRecordStore,
    seeded: dict[str, Any],
) -> InMemoryRecordStore:
    """The seeded store with an admin token loaded, for arranging extra rows."""
    await mem_store.authenticate_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    return mem_store
