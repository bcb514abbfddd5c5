"""Host → tenant resolution.

:class:`HostTenantResolver` turns a raw host header value into a
:class:`~frontdoor.core.types.TenantBundle` (or ``None``)::

    raw header ──normalize──► host key ──cache──► hit: return cached value
                                          │
                                          └─ miss: admin session
                                                    │
                                          domains.find_first(hostname = key,
                                                             expand site)
                                                    │
                                          bundle / None ──cache──► return

Outcomes
--------
=============================================  ===========  =========
situation                                      returns      cached?
=============================================  ===========  =========
no usable host                                 ``None``     no
store not configured / session unavailable     ``None``     no
no domain row                                  ``None``     yes (neg)
domain row whose site cannot be expanded       ``None``     yes (neg)
any other store failure                        ``None``     no
domain row with site                           bundle       yes
=============================================  ===========  =========

Confirmed absence and lookup failure look the same to the caller, but only
confirmed absence enters the negative cache; a store outage is logged at
ERROR and retried on the next request instead of being memoised for a TTL.

Concurrent misses for the same host are not deduplicated: each performs its
own query and the last write to the cache wins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from frontdoor.cache.host_cache import MISSING
from frontdoor.core.exceptions import FrontdoorError, RecordNotFoundError, StoreError
from frontdoor.core.types import SERVABLE_DOMAIN_STATUSES, DomainRecord, TenantBundle
from frontdoor.resolution.host import normalize_host
from frontdoor.utils import filters

if TYPE_CHECKING:
    from frontdoor.cache.host_cache import HostCache
    from frontdoor.storage.session import AdminSessionProvider

logger = logging.getLogger(__name__)

DOMAINS_COLLECTION = "domains"
SITE_RELATION = "site"


class HostTenantResolver:
    """Resolve the tenant bound to a host.

    Args:
        sessions: Source of the authenticated record store.
        cache: Resolution cache shared by all requests of this process.
        require_servable_status: Only match domain rows whose status is
            ``active`` or ``verified``.  Enabled in production; left off
            elsewhere so local test data needs no status.

    Example::

        resolver = HostTenantResolver(sessions, HostCache(ttl=60))
        bundle = await resolver.resolve(request.headers.get("host"))
        if bundle is None:
            ...  # render "domain not bound"
    """

    def __init__(
        self,
        sessions: AdminSessionProvider,
        cache: HostCache,
        require_servable_status: bool = False,
    ) -> None:
        self._sessions = sessions
        self._cache = cache
        self._require_servable_status = require_servable_status

    @property
    def cache(self) -> HostCache:
        return self._cache

    def domain_filter(self, host: str) -> str:
        """Build the domain lookup filter for a normalised *host*."""
        clauses = [filters.eq("hostname", host)]
        if self._require_servable_status:
            clauses.append(filters.one_of("status", SERVABLE_DOMAIN_STATUSES))
        return filters.all_of(*clauses)

    async def resolve(self, raw_host: str | None) -> TenantBundle | None:
        """Return the tenant bound to *raw_host*, or ``None``.

        Never raises for store or configuration problems; see the module
        docstring for which outcomes are cached.

        Args:
            raw_host: Raw ``Host`` / ``X-Forwarded-Host`` value.
        """
        host = normalize_host(raw_host)
        if host is None:
            logger.warning("[tenant] missing host header")
            return None

        cached = self._cache.get(host)
        if cached is not MISSING:
            logger.info("[tenant] cache hit host=%s", host)
            return cached
        logger.info("[tenant] cache miss host=%s", host)

        try:
            store = await self._sessions.get_session()
        except FrontdoorError as exc:
            logger.warning("[tenant] store session unavailable host=%s: %s", host, exc)
            return None
        if store is None:
            logger.warning("[tenant] store not configured host=%s", host)
            return None

        try:
            record = await store.find_first(
                DOMAINS_COLLECTION,
                self.domain_filter(host),
                expand=SITE_RELATION,
            )
        except RecordNotFoundError:
            logger.warning("[tenant] host not matched host=%s", host)
            self._cache.set(host, None)
            return None
        except StoreError as exc:
            logger.error("[tenant] domain lookup failed host=%s: %s", host, exc)  # noqa: TRY400
            return None

        try:
            domain = DomainRecord.model_validate(record)
            site = domain.expanded_site
        except ValidationError:
            logger.warning(
                "[tenant] malformed domain record host=%s id=%s", host, record.get("id")
            )
            self._cache.set(host, None)
            return None

        if site is None:
            logger.warning(
                "[tenant] domain found but site missing host=%s domain_id=%s",
                host,
                domain.id,
            )
            self._cache.set(host, None)
            return None

        logger.info("[tenant] resolved host=%s site_id=%s", host, site.id)
        bundle = TenantBundle(host=host, domain=domain, site=site)
        self._cache.set(host, bundle)
        return bundle


__all__ = ["DOMAINS_COLLECTION", "HostTenantResolver"]
