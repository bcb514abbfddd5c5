"""Host header parsing and normalisation.

Turns a raw ``Host`` / ``X-Forwarded-Host`` header value into the canonical
*host key* used for every tenant lookup and cache entry.

Examples::

    "Example.COM:8443"        → "example.com"
    "[::1]:3000"              → "[::1]"
    "a.com, b.com"            → "a.com"   (first hop added by the proxy chain)
    ""  /  None  /  " , x"    → None

Invariants
----------
* A host key never carries a port.
* Bracketed IPv6 literals keep their brackets so the key stays unambiguous.
* Host keys are lowercase, so comparison is case-insensitive.
* ``normalize_host`` is idempotent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

FORWARDED_HOST_HEADER = "x-forwarded-host"
HOST_HEADER = "host"


def normalize_host(raw: str | None) -> str | None:
    """Reduce a raw host header value to a host key.

    Args:
        raw: Header value as received.  May be absent, hold several
            comma-separated hosts, or carry a port.

    Returns:
        Lowercase host without port, or ``None`` when nothing usable remains.
    """
    if not raw:
        return None

    first = raw.split(",", 1)[0].strip()
    if not first:
        return None

    if first.startswith("["):
        closing = first.find("]")
        # An unterminated bracket is left as-is and will simply never match.
        host = first[: closing + 1] if closing != -1 else first
    else:
        host = first.split(":", 1)[0]

    host = host.strip().lower()
    return host or None


def pick_host_header(
    headers: Mapping[str, str],
    trust_forwarded: bool = True,
) -> str | None:
    """Return the raw host value a request should be routed by.

    ``X-Forwarded-Host`` wins over ``Host`` when both are present and the
    deployment trusts its reverse proxy.

    Args:
        headers: Case-insensitive header mapping (e.g. Starlette ``Headers``).
            Plain dicts must use lowercase keys.
        trust_forwarded: Whether ``X-Forwarded-Host`` may be used.

    Returns:
        The raw header value, or ``None`` when neither header is set.
    """
    if trust_forwarded:
        forwarded = headers.get(FORWARDED_HOST_HEADER)
        if forwarded:
            return forwarded
    return headers.get(HOST_HEADER) or None


def host_from_headers(
    headers: Mapping[str, str],
    trust_forwarded: bool = True,
) -> str | None:
    """Shortcut for ``normalize_host(pick_host_header(headers))``."""
    return normalize_host(pick_host_header(headers, trust_forwarded))


__all__ = [
    "FORWARDED_HOST_HEADER",
    "HOST_HEADER",
    "host_from_headers",
    "normalize_host",
    "pick_host_header",
]
