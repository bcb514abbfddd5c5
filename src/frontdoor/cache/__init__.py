"""Process-local host resolution cache."""

from frontdoor.cache.host_cache import MISSING, HostCache

__all__ = ["MISSING", "HostCache"]
