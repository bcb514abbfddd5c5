"""Tests for frontdoor.core.context — TenantContext and dependency helpers."""

from __future__ import annotations

import asyncio

import pytest

from frontdoor.core.context import (
    TenantContext,
    get_current_tenant,
    get_current_tenant_optional,
)
from frontdoor.core.exceptions import TenantNotFoundError
from frontdoor.core.types import DomainRecord, SiteRecord, TenantBundle


def _bundle(host: str = "1dun.co") -> TenantBundle:
    return TenantBundle(
        host=host,
        domain=DomainRecord(id=f"d-{host}", hostname=host, site="s1"),
        site=SiteRecord(id="s1", name="1dun"),
    )


class TestSetAndReset:
    def test_default_is_empty(self):
        assert TenantContext.get_optional() is None
        assert TenantContext.get_host() is None

    def test_get_raises_with_host(self):
        token = TenantContext.set(None, host="1dun.org")
        try:
            with pytest.raises(TenantNotFoundError) as exc_info:
                TenantContext.get()
            assert exc_info.value.host == "1dun.org"
        finally:
            TenantContext.reset(token)

    def test_reset_restores_previous(self):
        outer = TenantContext.set(_bundle("a.test"), host="a.test")
        inner = TenantContext.set(_bundle("b.test"), host="b.test")
        assert TenantContext.get().host == "b.test"
        TenantContext.reset(inner)
        assert TenantContext.get().host == "a.test"
        TenantContext.reset(outer)
        assert TenantContext.get_optional() is None


class TestScope:
    def test_sync_scope(self):
        b = _bundle()
        with TenantContext.scope(b) as bound:
            assert bound is b
            assert get_current_tenant() is b
            assert TenantContext.get_host() == "1dun.co"
        assert get_current_tenant_optional() is None

    async def test_async_scope_restores_on_error(self):
        with pytest.raises(RuntimeError):
            async with TenantContext.scope(_bundle()):
                raise RuntimeError("boom")
        assert TenantContext.get_optional() is None

    async def test_tasks_are_isolated(self):
        async def worker(host: str) -> str:
            async with TenantContext.scope(_bundle(host)):
                await asyncio.sleep(0)
                return TenantContext.get().host

        hosts = [f"t{n}.test" for n in range(5)]
        assert await asyncio.gather(*(worker(h) for h in hosts)) == hosts
