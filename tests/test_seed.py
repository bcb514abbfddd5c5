"""Tests for frontdoor.seed — demo tenant upserts."""

from __future__ import annotations

import pytest

from frontdoor.core.config import FrontdoorConfig
from frontdoor.core.exceptions import ConfigurationError
from frontdoor.seed import run, seed_demo_site, upsert_record

pytestmark = pytest.mark.integration


class TestUpsert:
    async def test_creates_when_absent(self, admin_store):
        record = await upsert_record(admin_store, "tags", 'slug = "new"', {"slug": "new"})
        assert record["slug"] == "new"
        assert admin_store.count("tags") == 1

    async def test_returns_existing_without_update(self, admin_store):
        first = await upsert_record(admin_store, "tags", 'slug = "x"', {"slug": "x", "n": 1})
        again = await upsert_record(admin_store, "tags", 'slug = "x"', {"slug": "x", "n": 2})
        assert again["id"] == first["id"]
        assert again["n"] == 1

    async def test_patches_when_update_given(self, admin_store):
        first = await upsert_record(admin_store, "tags", 'slug = "y"', {"slug": "y", "n": 1})
        again = await upsert_record(
            admin_store, "tags", 'slug = "y"', {"slug": "y", "n": 2}, {"n": 3}
        )
        assert again["id"] == first["id"]
        assert again["n"] == 3


class TestSeedDemoSite:
    async def test_rows_and_relations(self, admin_store, seeded):
        site = await admin_store.find_first("sites", 'site_slug = "1dun"')
        assert site["id"] == seeded["site"]
        assert site["description"] == "Seeded site for 1dun"
        for hostname in ("1dun.co", "1dun.net"):
            domain = await admin_store.find_first(
                "domains", f'hostname = "{hostname}"', expand="site"
            )
            assert domain["expand"]["site"]["id"] == seeded["site"]
            assert domain["status"] == "active"
        item = await admin_store.find_first("items", 'slug = "welcome"')
        assert item["category"] == seeded["category"]

    async def test_idempotent(self, admin_store, seeded):
        again = await seed_demo_site(admin_store)
        assert again == seeded
        for collection, expected in (
            ("users", 1),
            ("sites", 1),
            ("domains", 2),
            ("categories", 1),
            ("items", 1),
        ):
            assert admin_store.count(collection) == expected


class TestRun:
    async def test_requires_credentials(self):
        with pytest.raises(ConfigurationError):
            await run(FrontdoorConfig(_env_file=None, store_url="http://pb.test"))

    async def test_requires_store_url(self):
        with pytest.raises(ConfigurationError):
            await run(
                FrontdoorConfig(_env_file=None, admin_email="a@example.com", admin_password="pw")
            )
