"""ASGI middleware for per-request host routing and context injection."""

from frontdoor.middleware.frontdoor import HostRoutingMiddleware

__all__ = ["HostRoutingMiddleware"]
