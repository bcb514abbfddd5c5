"""Core abstractions — types, config, context, and exceptions."""

from frontdoor.core.config import FrontdoorConfig
from frontdoor.core.context import (
    TenantContext,
    get_current_tenant,
    get_current_tenant_optional,
)
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

__all__ = [
    # Config
    "FrontdoorConfig",
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
    # Types
    "AuthMode",
    "CategoryRecord",
    "DomainRecord",
    "DomainStatus",
    "ItemRecord",
    "SiteContent",
    "SiteRecord",
    "TenantBundle",
]
