"""Tests for frontdoor.core.config — FrontdoorConfig."""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from frontdoor.core.config import FrontdoorConfig
from frontdoor.core.types import AuthMode


def _cfg(**kwargs) -> FrontdoorConfig:
    return FrontdoorConfig(_env_file=None, **kwargs)


class TestDefaults:
    def test_defaults(self):
        c = _cfg()
        assert c.store_url is None
        assert c.auth_mode == AuthMode.PASSWORD
        assert c.environment == "development"
        assert c.host_cache_ttl == 60
        assert c.latest_items_limit == 12
        assert c.trust_forwarded_host is True
        assert c.is_production is False

    def test_root_host_strips_port(self):
        assert _cfg(root_domain="Platform.Example:3000").root_host == "platform.example"


class TestEnvironment:
    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("FRONTDOOR_STORE_URL", "https://hub.example.com/")
        monkeypatch.setenv("FRONTDOOR_ENVIRONMENT", "production")
        monkeypatch.setenv("FRONTDOOR_HOST_CACHE_TTL", "30")
        c = _cfg()
        assert c.store_url == "https://hub.example.com"
        assert c.is_production is True
        assert c.host_cache_ttl == 30


class TestValidation:
    def test_blank_store_url_is_none(self):
        assert _cfg(store_url="   ").store_url is None

    def test_token_mode_requires_token(self):
        with pytest.raises(ValidationError):
            _cfg(store_url="http://pb.test", auth_mode="token")

    def test_token_mode_without_store_is_allowed(self):
        assert _cfg(auth_mode="token").admin_token is None

    def test_password_mode_credentials_not_checked_at_startup(self):
        c = _cfg(store_url="http://pb.test")
        assert c.admin_email is None

    def test_auth_path_must_be_absolute(self):
        with pytest.raises(ValidationError):
            _cfg(admin_auth_path="api/admins/auth-with-password")

    @pytest.mark.parametrize("field", ["host_cache_ttl", "latest_items_limit", "host_cache_max_size"])
    def test_bounds(self, field):
        with pytest.raises(ValidationError):
            _cfg(**{field: 0})

    def test_unknown_environment(self):
        with pytest.raises(ValidationError):
            _cfg(environment="staging")


class TestMasking:
    def test_secrets_not_in_str(self):
        c = _cfg(
            store_url="http://pb.test",
            auth_mode="token",
            admin_token="tok-secret",
            admin_password="pw-secret",
        )
        text = str(c)
        assert "tok-secret" not in text
        assert "pw-secret" not in text
        assert "pb.test" in text
