"""frontdoor — serve each bound domain its own site from one deployment.

A request's ``Host`` (or ``X-Forwarded-Host``) header is normalised, looked
up in the record store's ``domains`` collection, and the bound site's
categories and latest items are rendered.  Unbound hosts get a "domain not
bound" page; the platform's own domain gets the landing page.

Quick start
-----------
.. code-block:: python

    from fastapi import FastAPI
    from frontdoor import FrontdoorConfig, FrontdoorManager, HostRoutingMiddleware

    config = FrontdoorConfig(
        store_url="http://127.0.0.1:8090",
        admin_email="admin@example.com",
        admin_password="secret",
    )
    manager = FrontdoorManager(config)

    app = FastAPI(lifespan=manager.create_lifespan())
    app.add_middleware(HostRoutingMiddleware, manager=manager)

or simply ``frontdoor.app.create_app(config)``.

Public surface
--------------
The symbols exported below form the stable public API.
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from frontdoor.cache.host_cache import HostCache
from frontdoor.content import ContentService
from frontdoor.core.config import FrontdoorConfig
from frontdoor.core.context import TenantContext, get_current_tenant, get_current_tenant_optional
from frontdoor.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    FrontdoorError,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
    TenantNotFoundError,
)
from frontdoor.core.types import (
    AuthMode,
    CategoryRecord,
    DomainRecord,
    DomainStatus,
    ItemRecord,
    SiteContent,
    SiteRecord,
    TenantBundle,
)
from frontdoor.manager import FrontdoorManager
from frontdoor.middleware.frontdoor import HostRoutingMiddleware
from frontdoor.resolution.host import normalize_host
from frontdoor.resolution.resolver import HostTenantResolver
from frontdoor.storage.memory import InMemoryRecordStore
from frontdoor.storage.pocketbase import PocketBaseStore
from frontdoor.storage.record_store import RecordStore
from frontdoor.storage.session import AdminSessionProvider

try:
    __version__: str = _pkg_version("frontdoor")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0.dev0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "FrontdoorConfig",
    # Manager
    "FrontdoorManager",
    # Domain types
    "AuthMode",
    "CategoryRecord",
    "DomainRecord",
    "DomainStatus",
    "ItemRecord",
    "SiteContent",
    "SiteRecord",
    "TenantBundle",
    # Context
    "TenantContext",
    "get_current_tenant",
    "get_current_tenant_optional",
    # Exceptions
    "AuthenticationError",
    "ConfigurationError",
    "FrontdoorError",
    "RecordNotFoundError",
    "StoreError",
    "StoreUnavailableError",
    "TenantNotFoundError",
    # Storage
    "AdminSessionProvider",
    "InMemoryRecordStore",
    "PocketBaseStore",
    "RecordStore",
    # Resolution
    "HostTenantResolver",
    "normalize_host",
    # Content
    "ContentService",
    # Cache
    "HostCache",
    # Middleware
    "HostRoutingMiddleware",
]
