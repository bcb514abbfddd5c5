"""FastAPI application serving each bound domain its own site home page.

Routes
------
``GET /``
    Tenant host: the site's categories and latest items.
    Platform (root) host or no host at all: the platform landing page.
    Any other host: 404 "domain not bound".
``GET /health``
    Liveness probe; bypasses host routing.

Run it with any ASGI server::

    uvicorn frontdoor.app:create_app --factory
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from frontdoor.core.config import FrontdoorConfig
from frontdoor.core.exceptions import TenantNotFoundError
from frontdoor.dependencies import TenantOptionalDep
from frontdoor.manager import FrontdoorManager
from frontdoor.middleware.frontdoor import HostRoutingMiddleware

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=TEMPLATES_DIR)


def _root_url(config: FrontdoorConfig) -> str:
    scheme = "https" if config.is_production else "http"
    return f"{scheme}://{config.root_domain}"


def create_app(
    config: FrontdoorConfig | None = None,
    manager: FrontdoorManager | None = None,
) -> FastAPI:
    """Build the front door application.

    Args:
        config: Settings; read from the environment when omitted.
        manager: Pre-built manager (tests inject one backed by an in-memory
            store).  Built from *config* when omitted.
    """
    if manager is None:
        manager = FrontdoorManager(config or FrontdoorConfig())
    config = manager.config

    app = FastAPI(
        title="frontdoor",
        lifespan=manager.create_lifespan(),
        docs_url=None,
        redoc_url=None,
    )
    app.state.manager = manager
    app.add_middleware(HostRoutingMiddleware, manager=manager)

    base_context = {
        "root_domain": config.root_domain,
        "root_url": _root_url(config),
    }

    @app.exception_handler(TenantNotFoundError)
    async def _tenant_not_found(request: Request, exc: TenantNotFoundError) -> Response:
        logger.info("Rendering domain-not-bound page host=%s", exc.host)
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {**base_context, "host": exc.host},
            status_code=404,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request, tenant: TenantOptionalDep) -> Response:
        host = getattr(request.state, "host", None)
        if tenant is not None:
            content = await manager.content.site_content(tenant.site.id)
            return templates.TemplateResponse(
                request,
                "site_home.html",
                {
                    **base_context,
                    "host": tenant.host,
                    "site": tenant.site,
                    "categories": content.categories,
                    "items": content.items,
                },
            )

        if host is not None and not manager.is_root_host(host):
            raise TenantNotFoundError(host=host)

        return templates.TemplateResponse(request, "platform_home.html", base_context)

    return app


__all__ = ["TEMPLATES_DIR", "create_app"]
