"""Configuration management for frontdoor.

``FrontdoorConfig`` is a ``pydantic_settings.BaseSettings`` model that reads
its values from environment variables (prefix ``FRONTDOOR_``), an optional
``.env`` file, or explicit keyword arguments.

Environment variables
---------------------
::

    FRONTDOOR_STORE_URL=https://hub.example.com
    FRONTDOOR_AUTH_MODE=password
    FRONTDOOR_ADMIN_EMAIL=admin@example.com
    FRONTDOOR_ADMIN_PASSWORD=...
    FRONTDOOR_ENVIRONMENT=production
    FRONTDOOR_ROOT_DOMAIN=example.com

Startup rules
-------------
* No ``store_url``: tenant resolution is disabled.  Every host resolves to
  "no tenant"; nothing fails.
* ``auth_mode=token`` with a ``store_url`` but no ``admin_token``: the model
  refuses to construct.  This is a fatal startup condition.
* ``auth_mode=password`` without email / password: construction succeeds and
  the first session request raises
  :class:`~frontdoor.core.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from frontdoor.core.types import AuthMode


class FrontdoorConfig(BaseSettings):
    """Process-wide settings for the host-routing front door.

    Example — programmatic::

        config = FrontdoorConfig(
            store_url="http://127.0.0.1:8090",
            admin_email="admin@example.com",
            admin_password="secret",
        )

    Example — environment variables::

        config = FrontdoorConfig()  # reads FRONTDOOR_* / .env
    """

    model_config = SettingsConfigDict(
        env_prefix="FRONTDOOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __str__(self) -> str:
        """Return a masked string representation safe for logging."""
        text = super().__repr__()
        text = re.sub(r"://([^:/]+):([^@]+)@", r"://\1:***@", text)
        text = re.sub(
            r"(admin_token|admin_password)=(?:'[^']*'|[^\s,)]+)",
            r"\1='***'",
            text,
        )
        return text

    ##############
    # Data store #
    ##############

    store_url: str | None = Field(
        default=None,
        description="Base URL of the record store.  Unset disables tenant resolution.",
    )

    store_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Per-request I/O timeout for store calls (seconds).",
    )

    auth_mode: AuthMode = Field(
        default=AuthMode.PASSWORD,
        description="How the admin session is obtained: static token or lazy password login.",
    )

    admin_token: str | None = Field(
        default=None,
        description="Pre-issued admin token.  Required in token mode.",
    )

    admin_email: str | None = Field(
        default=None,
        description="Admin identity used in password mode.",
    )

    admin_password: str | None = Field(
        default=None,
        description="Admin password used in password mode.",
    )

    admin_auth_path: str = Field(
        default="/api/admins/auth-with-password",
        description="Store endpoint that exchanges admin credentials for a token.",
    )

    ###########
    # Routing #
    ###########

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment.  Production only serves active/verified domains.",
    )

    root_domain: str = Field(
        default="localhost:3000",
        description="Platform host.  Requests for it render the platform page, not a tenant.",
    )

    trust_forwarded_host: bool = Field(
        default=True,
        description="Read X-Forwarded-Host before Host (trusted reverse proxy in front).",
    )

    excluded_paths: list[str] = Field(
        default_factory=lambda: ["/health", "/static"],
        description="Path prefixes that bypass host routing.",
    )

    #########
    # Cache #
    #########

    host_cache_ttl: int = Field(
        default=60,
        ge=1,
        description="Seconds a host resolution (positive or negative) stays cached.",
    )

    host_cache_max_size: int = Field(
        default=10_000,
        ge=1,
        description="Maximum number of host keys held in the resolution cache.",
    )

    ###########
    # Content #
    ###########

    latest_items_limit: int = Field(
        default=12,
        ge=1,
        le=200,
        description="Number of latest items shown on a tenant home page.",
    )

    ####################
    # Field validators #
    ####################

    @field_validator("store_url", mode="before")
    @classmethod
    def _normalise_store_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        url = str(v).strip().rstrip("/")
        return url or None

    @field_validator("admin_auth_path")
    @classmethod
    def _validate_auth_path(cls, v: str) -> str:
        if not v.startswith("/"):
            msg = "admin_auth_path must start with '/'."
            raise ValueError(msg)
        return v

    ##########################
    # Cross-field validation #
    ##########################

    @model_validator(mode="after")
    def _validate_credentials(self) -> FrontdoorConfig:
        """Refuse to start in token mode without a token.

        Password-mode credentials are deliberately not checked here; they
        are checked when the first session is requested.
        """
        if self.auth_mode == AuthMode.TOKEN and self.store_url and not self.admin_token:
            msg = "auth_mode='token' requires admin_token to be set."
            raise ValueError(msg)
        return self

    ##################
    # Helper methods #
    ##################

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def root_host(self) -> str:
        """Root domain reduced to a host key (no port, lowercase)."""
        from frontdoor.resolution.host import normalize_host  # noqa: PLC0415

        return normalize_host(self.root_domain) or ""


__all__ = ["FrontdoorConfig"]
