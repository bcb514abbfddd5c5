"""Seed the demo tenant into the record store.

Creates (or refreshes) the ``1dun`` site with two bound domains, one
category and one welcome item.  Every record is upserted by a unique
filter, so running the command twice leaves a single copy of each.

Usage::

    FRONTDOOR_STORE_URL=http://127.0.0.1:8090 \\
    FRONTDOOR_ADMIN_EMAIL=admin@example.com \\
    FRONTDOOR_ADMIN_PASSWORD=secret \\
        python -m frontdoor.seed
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING, Any

from frontdoor.core.config import FrontdoorConfig
from frontdoor.core.exceptions import ConfigurationError, FrontdoorError, RecordNotFoundError
from frontdoor.core.types import DomainStatus
from frontdoor.storage.pocketbase import PocketBaseStore
from frontdoor.utils import filters
from frontdoor.utils.security import mask_sensitive_data

if TYPE_CHECKING:
    from frontdoor.storage.record_store import RecordStore

logger = logging.getLogger(__name__)

DEMO_OWNER_EMAIL = "seed-1dun@example.com"
DEMO_OWNER_PASSWORD = "seed-1dun-password"  # noqa: S105
DEMO_SITE_SLUG = "1dun"
DEMO_HOSTNAMES = ("1dun.co", "1dun.net")


async def upsert_record(
    store: RecordStore,
    collection: str,
    filter: str,  # noqa: A002
    create_data: dict[str, Any],
    update_data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the record matching *filter*, creating it when absent.

    When the record exists and *update_data* is given it is patched with
    *update_data* first.
    """
    try:
        existing = await store.find_first(collection, filter)
    except RecordNotFoundError:
        logger.debug("[seed] creating %s %s", collection, mask_sensitive_data(create_data))
        created = await store.create(collection, create_data)
        logger.info("[seed] created %s id=%s", collection, created.get("id"))
        return created

    if update_data:
        return await store.update(collection, existing["id"], update_data)
    return existing


async def seed_demo_site(store: RecordStore) -> dict[str, Any]:
    """Upsert the demo tenant and return the ids of everything touched."""
    owner = await upsert_record(
        store,
        "users",
        filters.eq("email", DEMO_OWNER_EMAIL),
        {
            "email": DEMO_OWNER_EMAIL,
            "password": DEMO_OWNER_PASSWORD,
            "passwordConfirm": DEMO_OWNER_PASSWORD,
            "name": "1dun Seed Owner",
        },
    )
    logger.info("[seed] owner ready owner_id=%s", owner["id"])

    site_data = {
        "owner": owner["id"],
        "site_slug": DEMO_SITE_SLUG,
        "name": "1dun",
        "title": "1dun",
        "description": "Seeded site for 1dun",
    }
    site = await upsert_record(
        store,
        "sites",
        filters.eq("site_slug", DEMO_SITE_SLUG),
        site_data,
        site_data,
    )
    logger.info("[seed] site ready site_id=%s", site["id"])

    domain_ids: list[str] = []
    for hostname in DEMO_HOSTNAMES:
        domain_data = {
            "hostname": hostname,
            "site": site["id"],
            "status": DomainStatus.ACTIVE.value,
        }
        domain = await upsert_record(
            store,
            "domains",
            filters.eq("hostname", hostname),
            domain_data,
            domain_data,
        )
        domain_ids.append(domain["id"])
        logger.info("[seed] domain ready hostname=%s", hostname)

    category_data = {
        "site": site["id"],
        "title": "General",
        "slug": "general",
        "description": "Seeded category",
    }
    category = await upsert_record(
        store,
        "categories",
        filters.all_of(filters.eq("site", site["id"]), filters.eq("slug", "general")),
        category_data,
        category_data,
    )
    logger.info("[seed] category ready category_id=%s", category["id"])

    item_data = {
        "site": site["id"],
        "category": category["id"],
        "title": "Welcome to 1dun",
        "slug": "welcome",
        "excerpt": "Seeded item for the 1dun site",
        "content": "This is a seeded item created by the frontdoor seed command.",
    }
    item = await upsert_record(
        store,
        "items",
        filters.all_of(filters.eq("site", site["id"]), filters.eq("slug", "welcome")),
        item_data,
        item_data,
    )
    logger.info("[seed] item ready item_id=%s", item["id"])

    return {
        "owner": owner["id"],
        "site": site["id"],
        "domains": domain_ids,
        "category": category["id"],
        "item": item["id"],
    }


async def run(config: FrontdoorConfig) -> dict[str, Any]:
    """Authenticate with the configured admin credentials and seed."""
    if not config.admin_email or not config.admin_password:
        raise ConfigurationError(
            parameter="admin_email/admin_password",
            reason="seeding requires admin email and password",
        )
    store = PocketBaseStore.from_config(config)
    if store is None:
        raise ConfigurationError(parameter="store_url", reason="seeding requires a store URL")
    try:
        await store.authenticate_admin(config.admin_email, config.admin_password)
        logger.info("[seed] admin authenticated")
        return await seed_demo_site(store)
    finally:
        await store.close()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        ids = asyncio.run(run(FrontdoorConfig()))
    except FrontdoorError as exc:
        logger.error("[seed] failed: %s", exc)  # noqa: TRY400
        return 1
    logger.info("[seed] done %s", ids)
    return 0


__all__ = ["main", "seed_demo_site", "upsert_record"]


if __name__ == "__main__":
    sys.exit(main())
