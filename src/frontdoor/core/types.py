"""Domain types, enumerations, and record models for frontdoor.

This module is the single source of truth for the package's domain
vocabulary.  Other modules import *from* here, never the reverse.

Design notes
------------
* Records coming from the data store have no enforced shape beyond an
  ``id``.  Models therefore accept unknown fields (``extra="allow"``) and
  declare only the fields the rendering layer reads.
* All models are ``frozen=True``.  A :class:`TenantBundle` is shared
  read-only between every request that hits the same cache entry, so
  instances must never be mutated in place.
* Display values are resolved through explicit ordered field lists
  (``*_FIELDS`` tuples) evaluated with :func:`first_non_empty`.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class AuthMode(StrEnum):
    """How the admin session to the data store is obtained.

    TOKEN
        A pre-issued admin token is loaded once at startup.  No network call.
    PASSWORD
        The session authenticates lazily with an admin email / password pair.
    """

    TOKEN = "token"
    PASSWORD = "password"


class DomainStatus(StrEnum):
    """Lifecycle status of a hostname binding.

    Only ``ACTIVE`` and ``VERIFIED`` bindings are served in production.
    """

    PENDING = "pending"
    ACTIVE = "active"
    VERIFIED = "verified"
    DISABLED = "disabled"


#: Domain statuses accepted by the production status filter.
SERVABLE_DOMAIN_STATUSES: tuple[DomainStatus, ...] = (
    DomainStatus.ACTIVE,
    DomainStatus.VERIFIED,
)


# ---------------------------------------------------------------------------
# Display chains
# ---------------------------------------------------------------------------

SITE_TITLE_FIELDS = ("name", "title")
SITE_DESCRIPTION_FIELDS = ("description",)
SITE_META_TITLE_FIELDS = ("meta_title", "site_name")
CATEGORY_LABEL_FIELDS = ("name", "title", "id")
ITEM_TITLE_FIELDS = ("title", "name", "id")
ITEM_DATE_FIELDS = ("publishedAt", "created")

DEFAULT_SITE_DESCRIPTION = "Latest updates from this site"


def first_non_empty(record: Any, fields: tuple[str, ...]) -> Any:
    """Return the first truthy attribute of *record* named in *fields*.

    Args:
        record: Any object; missing attributes count as empty.
        fields: Candidate attribute names in precedence order.

    Returns:
        The first non-empty value, or ``None`` when all are empty.
    """
    for name in fields:
        value = getattr(record, name, None)
        if value:
            return value
    return None


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, str):
        return None
    # The store emits "2024-05-01 10:00:00.000Z"; ISO parsing needs the "T".
    text = value.strip().replace(" ", "T", 1)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Record(BaseModel):
    """A single row returned by the data store.

    Attributes:
        id: Opaque record id.
        created: Store-assigned creation timestamp (string as returned).
        updated: Store-assigned modification timestamp.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str = Field(..., min_length=1)
    created: str | None = None
    updated: str | None = None


class SiteRecord(Record):
    """Tenant metadata.  Only ``id`` is required."""

    name: str | None = None
    title: str | None = None
    description: str | None = None
    site_name: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: str | None = None

    def display_title(self, host: str) -> str:
        return first_non_empty(self, SITE_TITLE_FIELDS) or host

    def display_description(self) -> str:
        return first_non_empty(self, SITE_DESCRIPTION_FIELDS) or DEFAULT_SITE_DESCRIPTION

    def page_title(self, host: str) -> str:
        """Title used in the document ``<title>`` tag."""
        return first_non_empty(self, SITE_META_TITLE_FIELDS) or host


class CategoryRecord(Record):
    """A category belonging to a site."""

    site: str | None = None
    name: str | None = None
    title: str | None = None

    @property
    def label(self) -> str:
        return first_non_empty(self, CATEGORY_LABEL_FIELDS)


class ItemRecord(Record):
    """A content item belonging to a site."""

    site: str | None = None
    title: str | None = None
    name: str | None = None
    url: str | None = None
    publishedAt: str | None = None  # noqa: N815

    @property
    def display_title(self) -> str:
        return first_non_empty(self, ITEM_TITLE_FIELDS)

    @property
    def display_date(self) -> date | None:
        return _parse_date(first_non_empty(self, ITEM_DATE_FIELDS))


class DomainRecord(Record):
    """Join row binding a hostname to a site.

    ``expand`` carries the related site when the query asked for it.  A row
    whose site relation cannot be expanded (site deleted, relation broken)
    has :attr:`expanded_site` ``None``.
    """

    hostname: str | None = None
    site: str | None = None
    status: str | None = None
    expand: dict[str, Any] | None = None

    @property
    def expanded_site(self) -> SiteRecord | None:
        raw = (self.expand or {}).get("site")
        if not isinstance(raw, dict) or not raw.get("id"):
            return None
        return SiteRecord.model_validate(raw)


class TenantBundle(BaseModel):
    """Result of a successful host resolution.

    Attributes:
        host: The normalised host key that was resolved.
        domain: The matching domain row.
        site: The site the domain row points at.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    domain: DomainRecord
    site: SiteRecord


class SiteContent(BaseModel):
    """Content rendered on a tenant's home page."""

    model_config = ConfigDict(frozen=True)

    categories: tuple[CategoryRecord, ...] = ()
    items: tuple[ItemRecord, ...] = ()


class RecordPage(BaseModel):
    """One page of a list query.

    Attributes:
        page: 1-based page number.
        per_page: Requested page size.
        total_items: Total matches (``-1`` when the store skipped counting).
        items: Raw records on this page, in query order.
    """

    model_config = ConfigDict(frozen=True)

    page: int = 1
    per_page: int
    total_items: int = -1
    items: list[dict[str, Any]] = Field(default_factory=list)


class AdminAuth(BaseModel):
    """Outcome of an admin authentication call."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1)
    admin: dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "CATEGORY_LABEL_FIELDS",
    "DEFAULT_SITE_DESCRIPTION",
    "ITEM_DATE_FIELDS",
    "ITEM_TITLE_FIELDS",
    "SERVABLE_DOMAIN_STATUSES",
    "SITE_DESCRIPTION_FIELDS",
    "SITE_META_TITLE_FIELDS",
    "SITE_TITLE_FIELDS",
    "AdminAuth",
    "AuthMode",
    "CategoryRecord",
    "DomainRecord",
    "DomainStatus",
    "ItemRecord",
    "Record",
    "RecordPage",
    "SiteContent",
    "SiteRecord",
    "TenantBundle",
    "first_non_empty",
]
