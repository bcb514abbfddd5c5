"""FastAPI dependency factories for tenant-scoped handlers.

Annotated shorthand::

    @app.get("/")
    async def home(tenant: TenantDep):
        ...

``make_site_content_dependency`` captures the manager in a closure, so no
``app.state`` lookup happens per request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends

from frontdoor.core.context import get_current_tenant, get_current_tenant_optional
from frontdoor.core.types import SiteContent, TenantBundle

if TYPE_CHECKING:
    from frontdoor.manager import FrontdoorManager


#: The current tenant; raises ``TenantNotFoundError`` when the host is unbound.
TenantDep = Annotated[TenantBundle, Depends(get_current_tenant)]

#: The current tenant or ``None``.
TenantOptionalDep = Annotated[TenantBundle | None, Depends(get_current_tenant_optional)]


def make_site_content_dependency(manager: FrontdoorManager) -> Any:
    """Create a dependency returning the current tenant's categories and items.

    The dependency is a local closure, so declare it as a parameter default;
    a postponed ``Annotated`` string cannot reference it.

    Args:
        manager: The configured :class:`~frontdoor.manager.FrontdoorManager`.

    Example::

        get_site_content = make_site_content_dependency(manager)

        @app.get("/")
        async def home(content: SiteContent = Depends(get_site_content)):
            return {"items": len(content.items)}
    """

    async def _get_site_content(tenant: TenantDep) -> SiteContent:
        return await manager.content.site_content(tenant.site.id)

    return _get_site_content


__all__ = [
    "TenantDep",
    "TenantOptionalDep",
    "make_site_content_dependency",
]
