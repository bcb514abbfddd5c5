"""Utility functions — filter building and token helpers."""

from frontdoor.utils import filters
from frontdoor.utils.security import (
    generate_signing_key,
    issue_token,
    mask_sensitive_data,
    token_expired,
)

__all__ = [
    "filters",
    "generate_signing_key",
    "issue_token",
    "mask_sensitive_data",
    "token_expired",
]
