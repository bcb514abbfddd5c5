"""Host → tenant resolution.

:func:`normalize_host`
    Reduce a raw ``Host`` / ``X-Forwarded-Host`` value to a host key.

:class:`HostTenantResolver`
    Look the host key up in the ``domains`` collection, expanding the bound
    site, with positive and negative results cached per host.
"""

from frontdoor.resolution.host import host_from_headers, normalize_host, pick_host_header
from frontdoor.resolution.resolver import HostTenantResolver

__all__ = [
    "HostTenantResolver",
    "host_from_headers",
    "normalize_host",
    "pick_host_header",
]
