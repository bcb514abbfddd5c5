"""PocketBase record store over HTTP.

:class:`PocketBaseStore` implements :class:`~frontdoor.storage.record_store.RecordStore`
against the PocketBase REST API with a single shared ``httpx.AsyncClient``.

Endpoints used
--------------
::

    GET   /api/collections/{collection}/records           list / find_first
    POST  /api/collections/{collection}/records           create
    PATCH /api/collections/{collection}/records/{id}      update
    POST  {admin_auth_path}                               admin login

The admin token travels in the ``Authorization`` header exactly as issued
(PocketBase does not use a ``Bearer`` prefix).

Error mapping
-------------
- transport failure (connect, read timeout, DNS) → ``StoreUnavailableError``
- HTTP 404 → ``RecordNotFoundError``
- HTTP 400/401/403 on the auth endpoint → ``AuthenticationError``
- any other HTTP error, an undecodable or non-JSON body, or a malformed
  list page → ``StoreError``

Timeouts are the client's own (``timeout`` argument); nothing else in the
request path adds one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from frontdoor.core.exceptions import (
    AuthenticationError,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
)
from frontdoor.core.types import AdminAuth, RecordPage
from frontdoor.storage.record_store import RecordStore

if TYPE_CHECKING:
    from frontdoor.core.config import FrontdoorConfig

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_AUTH_PATH = "/api/admins/auth-with-password"


class PocketBaseStore(RecordStore):
    """HTTP client for a PocketBase instance.

    Args:
        base_url: PocketBase base URL (e.g. ``https://hub.example.com``).
        timeout: Per-request timeout in seconds.
        admin_auth_path: Endpoint that exchanges admin credentials for a
            token.  PocketBase >= 0.23 uses
            ``/api/collections/_superusers/auth-with-password``.
        transport: Optional ``httpx`` transport (tests use
            ``httpx.MockTransport``).

    Example::

        store = PocketBaseStore("http://127.0.0.1:8090")
        await store.authenticate_admin("admin@example.com", "secret")
        domain = await store.find_first("domains", 'hostname = "1dun.co"', expand="site")
        await store.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        admin_auth_path: str = DEFAULT_ADMIN_AUTH_PATH,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self._base_url = base_url.rstrip("/")
        self._admin_auth_path = admin_auth_path
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.info("PocketBaseStore initialised base_url=%s", self._base_url)

    @classmethod
    def from_config(cls, config: FrontdoorConfig) -> PocketBaseStore | None:
        """Build a store from settings, or ``None`` when no URL is configured."""
        if not config.store_url:
            return None
        return cls(
            config.store_url,
            timeout=config.store_timeout,
            admin_auth_path=config.admin_auth_path,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    ####################
    # Internal helpers #
    ####################

    @staticmethod
    def _records_path(collection: str, record_id: str | None = None) -> str:
        path = f"/api/collections/{quote(collection, safe='')}/records"
        if record_id is not None:
            path += f"/{quote(record_id, safe='')}"
        return path

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        if authenticated and self._auth_token:
            headers["Authorization"] = self._auth_token
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.TransportError as exc:
            logger.warning("Store request failed method=%s path=%s: %s", method, path, exc)
            raise StoreUnavailableError(
                f"Store unreachable: {type(exc).__name__}",
                details={"method": method, "path": path},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Store response unreadable method=%s path=%s: %s", method, path, exc)
            raise StoreError(
                f"Store response unreadable: {type(exc).__name__}",
                details={"method": method, "path": path},
            ) from exc
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(
                "Store returned a non-JSON body",
                status=response.status_code,
            ) from exc

    def _raise_for_status(
        self,
        response: httpx.Response,
        collection: str,
        filter: str | None = None,  # noqa: A002
    ) -> None:
        if response.is_success:
            return
        if response.status_code == 404:
            raise RecordNotFoundError(collection, filter)
        message = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = str(body.get("message") or "")
        raise StoreError(
            f"Store request failed with HTTP {response.status_code}"
            + (f": {message}" if message else ""),
            status=response.status_code,
            details={"collection": collection},
        )

    ##################
    # Authentication #
    ##################

    async def authenticate_admin(self, email: str, password: str) -> AdminAuth:
        response = await self._request(
            "POST",
            self._admin_auth_path,
            json={"identity": email, "password": password},
            authenticated=False,
        )
        if response.status_code in (400, 401, 403, 404):
            raise AuthenticationError(
                "Store rejected admin credentials",
                status=response.status_code,
            )
        self._raise_for_status(response, collection="_admins")
        body = self._json(response)
        if not isinstance(body, dict) or not body.get("token"):
            raise AuthenticationError(
                "Store auth response carried no token",
                status=response.status_code,
            )
        # Pre-0.23 servers return "admin"; newer ones return "record".
        auth = AdminAuth(token=body["token"], admin=body.get("admin") or body.get("record") or {})
        self._auth_token = auth.token
        return auth

    ###########
    # Queries #
    ###########

    async def list(
        self,
        collection: str,
        page: int = 1,
        per_page: int = 30,
        *,
        filter: str | None = None,  # noqa: A002
        sort: str | None = None,
        expand: str | None = None,
        skip_total: bool = False,
    ) -> RecordPage:
        params: dict[str, Any] = {"page": page, "perPage": per_page}
        if filter:
            params["filter"] = filter
        if sort:
            params["sort"] = sort
        if expand:
            params["expand"] = expand
        if skip_total:
            params["skipTotal"] = 1

        response = await self._request("GET", self._records_path(collection), params=params)
        self._raise_for_status(response, collection, filter)
        body = self._json(response)
        if not isinstance(body, dict):
            raise StoreError("Unexpected list response shape", status=response.status_code)
        try:
            return RecordPage(
                page=body.get("page", page),
                per_page=body.get("perPage", per_page),
                total_items=body.get("totalItems", -1),
                items=list(body.get("items") or []),
            )
        except ValidationError as exc:
            raise StoreError(
                "Unexpected list response shape",
                status=response.status_code,
                details={"collection": collection},
            ) from exc

    async def find_first(
        self,
        collection: str,
        filter: str,  # noqa: A002
        *,
        expand: str | None = None,
    ) -> dict[str, Any]:
        result = await self.list(
            collection, 1, 1, filter=filter, expand=expand, skip_total=True
        )
        if not result.items:
            raise RecordNotFoundError(collection, filter)
        return result.items[0]

    ##########
    # Writes #
    ##########

    async def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._request("POST", self._records_path(collection), json=data)
        self._raise_for_status(response, collection)
        return self._json(response)

    async def update(
        self,
        collection: str,
        record_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "PATCH", self._records_path(collection, record_id), json=data
        )
        self._raise_for_status(response, collection)
        return self._json(response)

    #############
    # Lifecycle #
    #############

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("PocketBaseStore closed")


__all__ = ["DEFAULT_ADMIN_AUTH_PATH", "PocketBaseStore"]
