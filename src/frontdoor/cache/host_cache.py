"""In-process TTL cache for host → tenant resolutions.

:class:`HostCache` memoises the outcome of a tenant lookup per host key so
that a remote query is not issued on every request.

Three-valued reads
------------------
``get`` distinguishes three outcomes:

* :data:`MISSING` — nothing usable is cached; the caller must look up.
* ``None`` — a *negative* result is cached: the host is known to be unbound.
* a :class:`~frontdoor.core.types.TenantBundle` — a positive result.

Negative results share the TTL of positive ones so unmapped hosts do not
trigger a remote miss on every request.

TTL strategy
------------
Each entry expires ``ttl`` seconds after insertion.  Expired entries are
treated exactly like absent ones and deleted at the moment they are read.
There is no background sweep.

Size bound
----------
At most ``max_size`` host keys are held; inserting beyond that evicts the
least-recently-used key.  This caps memory when clients send many distinct
unmapped hostnames.

Task safety
-----------
All mutation is synchronous (no ``await`` inside a method), so on a single
event loop no locking is needed.  Concurrent misses for the same host are
not deduplicated; each may query the store and the last ``set`` wins.
"""

from __future__ import annotations

from collections import OrderedDict
from enum import Enum
import logging
import time
from typing import TYPE_CHECKING, Final, Literal, NamedTuple

if TYPE_CHECKING:
    from frontdoor.core.types import TenantBundle

logger = logging.getLogger(__name__)


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


#: Returned by :meth:`HostCache.get` when no live entry exists.
MISSING: Final = _Missing.MISSING


class _Entry(NamedTuple):
    """A single cache entry.

    Attributes:
        value: Cached bundle, or ``None`` for a negative result.
        expires_at: ``time.monotonic()`` value at which the entry goes stale.
    """

    value: TenantBundle | None
    expires_at: float


class HostCache:
    """Per-host TTL cache with LRU size bound.

    Args:
        ttl: Seconds before an entry is considered stale.  Default: 60.
        max_size: Maximum number of host keys held.  Default: 10 000.

    Example::

        cache = HostCache(ttl=60)
        cache.set("1dun.co", bundle)
        hit = cache.get("1dun.co")
        if hit is MISSING:
            ...
    """

    def __init__(self, ttl: int = 60, max_size: int = 10_000) -> None:
        if ttl < 1:
            msg = "ttl must be >= 1 second"
            raise ValueError(msg)
        if max_size < 1:
            msg = "max_size must be >= 1"
            raise ValueError(msg)

        self._ttl = ttl
        self._max_size = max_size
        self._entries: OrderedDict[str, _Entry] = OrderedDict()

        self._hits: int = 0
        self._negative_hits: int = 0
        self._misses: int = 0

        logger.debug("HostCache initialised ttl=%ds max_size=%d", ttl, max_size)

    ########
    # Read #
    ########

    def get(self, host: str) -> TenantBundle | None | Literal[_Missing.MISSING]:
        """Return the cached resolution for *host*.

        Args:
            host: Normalised host key.

        Returns:
            :data:`MISSING` on miss or expiry, ``None`` for a cached negative
            result, otherwise the cached bundle.
        """
        entry = self._entries.get(host)
        if entry is None:
            self._misses += 1
            return MISSING
        if time.monotonic() >= entry.expires_at:
            del self._entries[host]
            self._misses += 1
            return MISSING
        self._entries.move_to_end(host)
        self._hits += 1
        if entry.value is None:
            self._negative_hits += 1
        return entry.value

    #########
    # Write #
    #########

    def set(self, host: str, value: TenantBundle | None) -> None:
        """Cache *value* for *host*, replacing any previous entry.

        Args:
            host: Normalised host key.
            value: Resolved bundle, or ``None`` to cache a negative result.
        """
        if host not in self._entries and len(self._entries) >= self._max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("LRU evicted host=%s", evicted)
        self._entries[host] = _Entry(value=value, expires_at=time.monotonic() + self._ttl)
        self._entries.move_to_end(host)

    def invalidate(self, host: str) -> bool:
        """Drop the entry for *host*.  Returns ``True`` when one existed."""
        return self._entries.pop(host, None) is not None

    def clear(self) -> int:
        """Drop every entry.  Returns the number of entries removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug("HostCache cleared (%d entries evicted)", count)
        return count

    ###########################
    # Metrics / introspection #
    ###########################

    def size(self) -> int:
        """Number of entries currently held (expired ones included until read)."""
        return len(self._entries)

    def stats(self) -> dict[str, int]:
        """Return a snapshot of cache counters for monitoring."""
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_size": self._max_size,
            "ttl": self._ttl,
            "hits": self._hits,
            "negative_hits": self._negative_hits,
            "misses": self._misses,
            "hit_rate_pct": int(self._hits * 100 / total) if total > 0 else 0,
        }


__all__ = ["MISSING", "HostCache"]
