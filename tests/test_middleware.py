"""Integration tests for frontdoor.middleware.frontdoor — HostRoutingMiddleware."""

from __future__ import annotations

from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
import pytest
import pytest_asyncio

from frontdoor.core.context import TenantContext
from frontdoor.middleware.frontdoor import HostRoutingMiddleware

pytestmark = pytest.mark.integration


def _build_app(manager, excluded_paths=None) -> FastAPI:
    app = FastAPI()
    app.add_middleware(HostRoutingMiddleware, manager=manager, excluded_paths=excluded_paths)

    @app.get("/whoami")
    async def whoami(request: Request):
        bundle = TenantContext.get_optional()
        return {
            "site": bundle.site.id if bundle else None,
            "host": TenantContext.get_host(),
            "state_host": request.state.host,
            "state_site": request.state.tenant.site.id if request.state.tenant else None,
        }

    @app.get("/health")
    async def health():
        return {"context_host": TenantContext.get_host()}

    return app


@pytest_asyncio.fixture
async def client(manager, seeded):
    async with AsyncClient(
        transport=ASGITransport(app=_build_app(manager)), base_url="http://testserver"
    ) as c:
        yield c


class TestRouting:
    async def test_tenant_bound_for_request(self, client, seeded):
        r = await client.get("/whoami", headers={"Host": "1dun.co:443"})
        assert r.json() == {
            "site": seeded["site"],
            "host": "1dun.co",
            "state_host": "1dun.co",
            "state_site": seeded["site"],
        }

    async def test_unbound_host_passes_through_with_none(self, client):
        r = await client.get("/whoami", headers={"Host": "nobody.test"})
        assert r.status_code == 200
        assert r.json()["site"] is None
        assert r.json()["host"] == "nobody.test"

    async def test_root_host_not_resolved(self, client, manager):
        r = await client.get("/whoami", headers={"Host": "LOCALHOST:3000"})
        assert r.json()["site"] is None
        assert manager.cache.size() == 0

    async def test_excluded_path_skips_routing(self, client):
        r = await client.get("/health", headers={"Host": "1dun.co"})
        assert r.json() == {"context_host": None}

    async def test_context_restored_after_request(self, client):
        await client.get("/whoami", headers={"Host": "1dun.co"})
        assert TenantContext.get_optional() is None

    async def test_untrusted_forwarded_host(self, manager, seeded):
        manager.config.trust_forwarded_host = False
        async with AsyncClient(
            transport=ASGITransport(app=_build_app(manager)), base_url="http://testserver"
        ) as c:
            r = await c.get("/whoami", headers={"Host": "1dun.co", "X-Forwarded-Host": "x.test"})
        assert r.json()["host"] == "1dun.co"
        assert r.json()["site"] == seeded["site"]

    async def test_custom_excluded_paths(self, manager, seeded):
        async with AsyncClient(
            transport=ASGITransport(app=_build_app(manager, excluded_paths=["/who"])),
            base_url="http://testserver",
        ) as c:
            r = await c.get("/health", headers={"Host": "1dun.co"})
        assert r.json() == {"context_host": "1dun.co"}
