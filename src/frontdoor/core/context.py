"""Async-safe tenant context management using :mod:`contextvars`.

Each asyncio task (i.e. each HTTP request) receives its own copy of every
:class:`~contextvars.ContextVar`, so the tenant bound by the middleware is
isolated from every other concurrent request without explicit locking.

Two pieces of per-request state are tracked:

* the resolved :class:`~frontdoor.core.types.TenantBundle` (or ``None``), and
* the host key the request arrived on, so a "domain not bound" page can name
  it even when resolution failed.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any

from frontdoor.core.exceptions import TenantNotFoundError

if TYPE_CHECKING:
    from frontdoor.core.types import TenantBundle

_tenant_ctx: ContextVar[TenantBundle | None] = ContextVar("tenant", default=None)
_host_ctx: ContextVar[str | None] = ContextVar("tenant_host", default=None)


class TenantContext:
    """Namespace for async-safe per-request tenant context.

    All methods are static; this class is never instantiated.

    Usage in middleware::

        token = TenantContext.set(bundle, host=host)
        try:
            await app(scope, receive, send)
        finally:
            TenantContext.reset(token)
    """

    @staticmethod
    def set(
        bundle: TenantBundle | None,
        host: str | None = None,
    ) -> tuple[Token[TenantBundle | None], Token[str | None]]:
        """Bind *bundle* and *host* to the current request.

        Returns:
            Opaque token pair for :meth:`reset`.
        """
        return _tenant_ctx.set(bundle), _host_ctx.set(host)

    @staticmethod
    def reset(token: tuple[Token[TenantBundle | None], Token[str | None]]) -> None:
        """Restore the context captured by a previous :meth:`set` call."""
        tenant_token, host_token = token
        _tenant_ctx.reset(tenant_token)
        _host_ctx.reset(host_token)

    @staticmethod
    def get() -> TenantBundle:
        """Return the current tenant bundle.

        Raises:
            TenantNotFoundError: When the request's host is not bound to a
                site, or the request bypassed the middleware.
        """
        bundle = _tenant_ctx.get()
        if bundle is None:
            raise TenantNotFoundError(host=_host_ctx.get())
        return bundle

    @staticmethod
    def get_optional() -> TenantBundle | None:
        return _tenant_ctx.get()

    @staticmethod
    def get_host() -> str | None:
        """Return the host key of the current request, if any."""
        return _host_ctx.get()

    class scope:
        """Context manager that binds a tenant for the duration of a block.

        Useful for background work and tests::

            async with TenantContext.scope(bundle):
                ...
        """

        def __init__(self, bundle: TenantBundle | None, host: str | None = None) -> None:
            self._bundle = bundle
            self._host = host if host is not None else (bundle.host if bundle else None)
            self._token: tuple[Token[TenantBundle | None], Token[str | None]] | None = None

        async def __aenter__(self) -> TenantBundle | None:
            self._token = TenantContext.set(self._bundle, self._host)
            return self._bundle

        async def __aexit__(self, *exc_info: Any) -> None:
            if self._token is not None:
                TenantContext.reset(self._token)

        def __enter__(self) -> TenantBundle | None:
            self._token = TenantContext.set(self._bundle, self._host)
            return self._bundle

        def __exit__(self, *exc_info: Any) -> None:
            if self._token is not None:
                TenantContext.reset(self._token)


def get_current_tenant() -> TenantBundle:
    """FastAPI dependency: return the current tenant or raise.

    Raises:
        TenantNotFoundError: When no tenant is bound to this request.
    """
    return TenantContext.get()


def get_current_tenant_optional() -> TenantBundle | None:
    """FastAPI dependency: return the current tenant or ``None``."""
    return TenantContext.get_optional()


__all__ = [
    "TenantContext",
    "get_current_tenant",
    "get_current_tenant_optional",
]
