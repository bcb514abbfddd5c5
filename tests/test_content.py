"""Tests for frontdoor.content — ContentService."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from frontdoor.content import ContentService
from frontdoor.core.exceptions import StoreError, StoreUnavailableError
from frontdoor.core.types import AuthMode
from frontdoor.storage.pocketbase import PocketBaseStore
from frontdoor.storage.session import AdminSessionProvider


async def _populate(store, site_id: str, *, items: int = 0, categories: tuple[str, ...] = ()):
    for n in range(items):
        await store.create("items", {"site": site_id, "title": f"Item {n:02d}"})
    for name in categories:
        await store.create("categories", {"site": site_id, "name": name})


class TestLatestItems:
    async def test_newest_first_and_limited(self, admin_store, sessions):
        site = await admin_store.create("sites", {"name": "busy"})
        await _populate(admin_store, site["id"], items=20)
        content = ContentService(sessions)

        items = await content.latest_items(site["id"], limit=12)

        assert len(items) == 12
        assert [i.title for i in items] == [f"Item {n:02d}" for n in range(19, 7, -1)]

    async def test_default_limit(self, admin_store, sessions):
        site = await admin_store.create("sites", {"name": "busy"})
        await _populate(admin_store, site["id"], items=15)
        assert len(await ContentService(sessions).latest_items(site["id"])) == 10
        assert len(await ContentService(sessions, latest_items_limit=12).latest_items(site["id"])) == 12

    async def test_scoped_to_site(self, admin_store, sessions, seeded):
        other = await admin_store.create("sites", {"name": "other"})
        await _populate(admin_store, other["id"], items=3)
        items = await ContentService(sessions).latest_items(seeded["site"])
        assert [i.title for i in items] == ["Welcome to 1dun"]

    async def test_empty_site_id(self, sessions):
        assert await ContentService(sessions).latest_items("") == []

    @pytest.mark.parametrize("limit", [0, -3])
    async def test_rejects_non_positive_limit(self, sessions, limit):
        with pytest.raises(ValueError, match="limit must be >= 1"):
            await ContentService(sessions).latest_items("site1", limit=limit)


class TestCategories:
    async def test_sorted_by_name(self, admin_store, sessions):
        site = await admin_store.create("sites", {"name": "cats"})
        await _populate(admin_store, site["id"], categories=("Zeta", "Alpha", "Mid"))
        categories = await ContentService(sessions).categories(site["id"])
        assert [c.label for c in categories] == ["Alpha", "Mid", "Zeta"]

    async def test_walks_every_page(self, admin_store, sessions):
        site = await admin_store.create("sites", {"name": "many"})
        names = tuple(f"cat-{n:04d}" for n in range(501))
        await _populate(admin_store, site["id"], categories=names)
        categories = await ContentService(sessions).categories(site["id"])
        assert len(categories) == 501

    async def test_label_falls_back_to_title(self, seeded, sessions):
        categories = await ContentService(sessions).categories(seeded["site"])
        assert [c.label for c in categories] == ["General"]


class TestDegradation:
    async def test_store_failure_yields_empty(self, mem_store, sessions, seeded):
        failing = AsyncMock(side_effect=StoreUnavailableError("down"))
        with patch.object(mem_store, "list", new=failing):
            content = ContentService(sessions)
            assert await content.latest_items(seeded["site"]) == []
            assert await content.categories(seeded["site"]) == []

    async def test_login_failure_yields_empty(self, mem_store, seeded):
        sessions = AdminSessionProvider(mem_store, email="admin@example.com", password="bad")
        content = ContentService(sessions)
        assert await content.latest_items(seeded["site"]) == []
        assert await content.categories(seeded["site"]) == []

    async def test_no_store_yields_empty(self):
        content = ContentService(AdminSessionProvider(None))
        assert await content.latest_items("site1") == []
        assert await content.categories("site1") == []

    async def test_one_failing_query_does_not_sink_the_other(self, mem_store, sessions, seeded):
        original = mem_store.list

        async def items_fail(collection, *args, **kwargs):
            if collection == "items":
                raise StoreError("boom", status=500)
            return await original(collection, *args, **kwargs)

        with patch.object(mem_store, "list", new=items_fail):
            result = await ContentService(sessions).site_content(seeded["site"])
        assert result.items == ()
        assert [c.label for c in result.categories] == ["General"]

    async def test_undecodable_store_body_yields_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")

        store = PocketBaseStore("http://pb.test", transport=httpx.MockTransport(handler))
        sessions = AdminSessionProvider(store, mode=AuthMode.TOKEN, token="admin-token")
        result = await ContentService(sessions).site_content("abc")
        assert result.categories == ()
        assert result.items == ()
        await store.close()


class TestSiteContent:
    async def test_fetches_both(self, seeded, sessions):
        result = await ContentService(sessions).site_content(seeded["site"], limit=12)
        assert [c.label for c in result.categories] == ["General"]
        assert [i.display_title for i in result.items] == ["Welcome to 1dun"]

    async def test_single_login_for_both_queries(self, mem_store, sessions, seeded):
        spy = AsyncMock(wraps=mem_store.authenticate_admin)
        with patch.object(mem_store, "authenticate_admin", new=spy):
            await ContentService(sessions).site_content(seeded["site"])
        assert spy.await_count == 1
