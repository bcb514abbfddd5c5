"""Security helpers for frontdoor.

``token_expired``
    Decide whether an admin token is still usable by reading its ``exp``
    claim.  The signature is *not* verified; only the store can do that.

``issue_token``
    Sign a short-lived HS256 token.  Used by the in-memory store to mimic the
    tokens a real store hands out.

``mask_sensitive_data``
    Redact sensitive keys from a dictionary before logging.
"""

from __future__ import annotations

import secrets
import time
from typing import Any

from jose import JWTError, jwt

#: Treat tokens that expire within this many seconds as already expired, so a
#: request does not leave with a token that dies in flight.
EXPIRY_LEEWAY_SECONDS = 10

_SENSITIVE_KEYS = frozenset(
    {"password", "passwordconfirm", "token", "admin_token", "admin_password", "secret"}
)


def token_expired(token: str | None, leeway: int = EXPIRY_LEEWAY_SECONDS) -> bool:
    """Return ``True`` when *token* is absent, unreadable or past its ``exp``.

    Tokens without an ``exp`` claim never expire.

    Args:
        token: Compact JWT string.
        leeway: Seconds of margin subtracted from the expiry.
    """
    if not token:
        return True
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return True
    exp = claims.get("exp")
    if exp is None:
        return False
    try:
        return float(exp) - leeway <= time.time()
    except (TypeError, ValueError):
        return True


def generate_signing_key() -> str:
    """Return a random hex key suitable for HS256 signing."""
    return secrets.token_hex(32)


def issue_token(subject: str, signing_key: str, ttl: int = 3600, **claims: Any) -> str:
    """Sign an HS256 token for *subject* valid for *ttl* seconds."""
    now = int(time.time())
    payload = {"id": subject, "iat": now, "exp": now + ttl, **claims}
    return jwt.encode(payload, signing_key, algorithm="HS256")


def mask_sensitive_data(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *data* with credential-like keys replaced by ``"***"``."""
    return {
        k: "***" if k.lower() in _SENSITIVE_KEYS else v
        for k, v in data.items()
    }


__all__ = [
    "EXPIRY_LEEWAY_SECONDS",
    "generate_signing_key",
    "issue_token",
    "mask_sensitive_data",
    "token_expired",
]
