"""Custom exceptions for frontdoor.

All exceptions derive from ``FrontdoorError`` so callers can catch the entire
family with a single ``except FrontdoorError`` clause while still being able
to handle individual sub-types.

Exception hierarchy::

    FrontdoorError
    ├── ConfigurationError
    ├── StoreError
    │   ├── RecordNotFoundError
    │   ├── StoreUnavailableError
    │   └── AuthenticationError
    └── TenantNotFoundError

Boundary rules:
    - The tenant resolver and the content fetchers never let these escape;
      they degrade to "no tenant" / empty sequences.
    - The admin session accessor raises ``ConfigurationError``,
      ``AuthenticationError`` and ``StoreUnavailableError`` to its immediate
      caller.
    - ``TenantNotFoundError`` is raised only by FastAPI dependencies when a
      route requires a tenant; the application maps it to a 404 page.
    - ``details`` must never contain credentials or tokens.
"""

from __future__ import annotations

from typing import Any


class FrontdoorError(Exception):
    """Base exception for all frontdoor errors.

    Attributes:
        message: Human-readable description of the error.
        details: Supplementary key-value context.  Safe to log.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class ConfigurationError(FrontdoorError):
    """Raised when required settings are missing or inconsistent.

    In token mode a missing admin token is detected at startup.  In password
    mode missing credentials are only detected on first session use.

    Attributes:
        parameter: The name of the offending setting.
        reason: Why the current value is unusable.
    """

    def __init__(
        self,
        parameter: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Invalid configuration for {parameter!r}: {reason}", details)
        self.parameter = parameter
        self.reason = reason


class StoreError(FrontdoorError):
    """Raised when a data-store call fails.

    Attributes:
        status: HTTP status reported by the store (``None`` for transport
            failures and in-process stores).
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status = status


class RecordNotFoundError(StoreError):
    """Raised when a query is answered with a confirmed absence.

    Attributes:
        collection: Collection that was queried.
        filter: Filter expression that matched nothing (``None`` for lookups
            by id).
    """

    def __init__(
        self,
        collection: str,
        filter: str | None = None,  # noqa: A002
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"No record in {collection!r} matches the query",
            status=404,
            details=details,
        )
        self.collection = collection
        self.filter = filter


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached (connect error, timeout, DNS)."""


class AuthenticationError(StoreError):
    """Raised when the store rejects the admin credentials."""


class TenantNotFoundError(FrontdoorError):
    """Raised when a route requires a tenant but none is bound to the host.

    Attributes:
        host: The host key that failed to resolve (``None`` when the request
            carried no usable host).
    """

    def __init__(
        self,
        host: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"No site bound to host {host!r}" if host else "No site bound to host"
        super().__init__(message, details)
        self.host = host


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "FrontdoorError",
    "RecordNotFoundError",
    "StoreError",
    "StoreUnavailableError",
    "TenantNotFoundError",
]
