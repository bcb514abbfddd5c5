"""Raw ASGI host-routing middleware.

For every HTTP request the middleware reads the host the client asked for,
resolves it to a tenant and binds the result to
:class:`~frontdoor.core.context.TenantContext` for the rest of the request.

::

    Client                      Middleware                         App
      │── GET / Host: 1dun.co ──►│                                  │
      │                      normalize host                         │
      │                      root domain? ── yes ──► tenant = None  │
      │                          │ no                               │
      │                      resolver.resolve(host)                 │
      │                      TenantContext.set(tenant, host)        │
      │                          ├── await app() ──────────────────►│
      │                          │◄── response ─────────────────────│
      │◄── response ─────────────│                                  │
      │                      TenantContext.reset()                  │

The middleware never rejects a request.  An unbound host leaves the tenant
as ``None`` and route handlers decide what to render; the resolver itself
never raises for store failures.

Raw ASGI is used rather than ``BaseHTTPMiddleware`` so streaming responses
are not buffered and the context variables reach background tasks.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.datastructures import Headers

from frontdoor.core.context import TenantContext
from frontdoor.resolution.host import normalize_host, pick_host_header

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

    from frontdoor.manager import FrontdoorManager

logger = logging.getLogger(__name__)


class HostRoutingMiddleware:
    """Resolve the tenant for each request from its ``Host`` header.

    Args:
        app: The downstream ASGI application.
        manager: The configured :class:`~frontdoor.manager.FrontdoorManager`.
        excluded_paths: Path prefixes that bypass resolution.  Defaults to
            ``manager.config.excluded_paths``.

    Example::

        app.add_middleware(HostRoutingMiddleware, manager=manager)
    """

    def __init__(
        self,
        app: ASGIApp,
        manager: FrontdoorManager,
        excluded_paths: list[str] | None = None,
    ) -> None:
        self._app = app
        self._manager = manager
        self._excluded: list[str] = (
            excluded_paths if excluded_paths is not None else list(manager.config.excluded_paths)
        )

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._excluded)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        if self._is_excluded(scope.get("path", "/")):
            await self._app(scope, receive, send)
            return

        raw_host = pick_host_header(
            Headers(scope=scope),
            trust_forwarded=self._manager.config.trust_forwarded_host,
        )
        host = normalize_host(raw_host)

        if self._manager.is_root_host(host):
            bundle = None
        else:
            bundle = await self._manager.resolver.resolve(raw_host)

        # Request.state wraps this mapping; servers with lifespan state pre-populate it.
        state = scope.setdefault("state", {})
        state["tenant"] = bundle
        state["host"] = host

        token = TenantContext.set(bundle, host=host)
        try:
            await self._app(scope, receive, send)
        finally:
            TenantContext.reset(token)


__all__ = ["HostRoutingMiddleware"]
