"""In-memory record store for testing and local development.

Warning:
    All records live in Python dictionaries and are **lost when the process
    exits**.  Use it for unit tests, integration tests and demos only.

Behaviour mirrored from the real store
--------------------------------------
- Filter expressions: ``=``, ``!=``, ``>``, ``>=``, ``<``, ``<=``, ``~``
  (case-insensitive contains), ``&&``, ``||`` and parentheses, with JSON
  string / number / ``true`` / ``false`` / ``null`` literals.
- Sorting: comma-separated fields, ``-`` prefix for descending.
- ``expand``: one level of relation expansion.  A relation whose target
  record is missing is left out of ``expand``, as the real store does.
- ``id`` / ``created`` / ``updated`` are assigned on write.  ``created``
  values are strictly increasing so "latest first" ordering is stable.
- Admin-only access: with ``require_auth=True`` (default) every query and
  write needs a token this store issued and that has not expired.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import copy
from datetime import UTC, datetime, timedelta
import json
import logging
import re
import secrets
import string
from typing import Any

from jose import JWTError, jwt

from frontdoor.core.exceptions import AuthenticationError, RecordNotFoundError, StoreError
from frontdoor.core.types import AdminAuth, RecordPage
from frontdoor.storage.record_store import RecordStore
from frontdoor.utils.security import generate_signing_key, issue_token

logger = logging.getLogger(__name__)

#: Relation field → target collection used by ``expand``.
DEFAULT_RELATIONS: dict[str, str] = {
    "site": "sites",
    "category": "categories",
    "owner": "users",
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _new_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(15))


def _format_timestamp(dt: datetime) -> str:
    return f"{dt:%Y-%m-%d %H:%M:%S}.{dt.microsecond // 1000:03d}Z"


#####################
# Filter evaluation #
#####################

_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<lparen>\()
      | (?P<rparen>\))
      | (?P<and>&&)
      | (?P<or>\|\|)
      | (?P<op>!=|>=|<=|=|>|<|~)
      | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
      | (?P<number>-?\d+(?:\.\d+)?)
      | (?P<ident>[A-Za-z_][A-Za-z0-9_.]*)
    )""",
    re.VERBOSE,
)

_Predicate = Callable[[dict[str, Any]], bool]


def _tokenize(expr: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    while pos < len(expr):
        if expr[pos:].strip() == "":
            break
        match = _TOKEN_RE.match(expr, pos)
        if match is None or match.end() == pos:
            msg = f"Invalid filter near position {pos}: {expr!r}"
            raise StoreError(msg, status=400)
        kind = match.lastgroup or ""
        tokens.append((kind, match.group(kind)))
        pos = match.end()
    return tokens


def _literal(kind: str, text: str) -> Any:
    if kind == "string":
        if text.startswith("'"):
            return text[1:-1].replace("\\'", "'").replace("\\\\", "\\")
        return json.loads(text)
    if kind == "number":
        return float(text) if "." in text else int(text)
    keywords = {"true": True, "false": False, "null": None}
    if text in keywords:
        return keywords[text]
    msg = f"Expected a literal, got {text!r}"
    raise StoreError(msg, status=400)


def _field_value(record: dict[str, Any], path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _compare(op: str, left: Any, right: Any) -> bool:
    if op == "=":
        return left == right or (left in ("", None) and right in ("", None))
    if op == "!=":
        return not _compare("=", left, right)
    if op == "~":
        return right is not None and str(right).lower() in str(left or "").lower()
    if left is None or right is None:
        return False
    try:
        if op == ">":
            return left > right
        if op == ">=":
            return left >= right
        if op == "<":
            return left < right
        return left <= right
    except TypeError:
        return False


class _FilterParser:
    """Recursive-descent parser: ``or := and ('||' and)*``, ``and := atom ('&&' atom)*``."""

    def __init__(self, expr: str) -> None:
        self._tokens = _tokenize(expr)
        self._pos = 0

    def parse(self) -> _Predicate:
        if not self._tokens:
            return lambda _record: True
        predicate = self._or()
        if self._pos != len(self._tokens):
            msg = f"Unexpected token {self._tokens[self._pos][1]!r} in filter"
            raise StoreError(msg, status=400)
        return predicate

    def _peek(self) -> str | None:
        return self._tokens[self._pos][0] if self._pos < len(self._tokens) else None

    def _take(self, kind: str) -> str:
        if self._peek() != kind:
            msg = f"Expected {kind} in filter"
            raise StoreError(msg, status=400)
        text = self._tokens[self._pos][1]
        self._pos += 1
        return text

    def _or(self) -> _Predicate:
        parts = [self._and()]
        while self._peek() == "or":
            self._take("or")
            parts.append(self._and())
        if len(parts) == 1:
            return parts[0]
        return lambda record: any(p(record) for p in parts)

    def _and(self) -> _Predicate:
        parts = [self._atom()]
        while self._peek() == "and":
            self._take("and")
            parts.append(self._atom())
        if len(parts) == 1:
            return parts[0]
        return lambda record: all(p(record) for p in parts)

    def _atom(self) -> _Predicate:
        if self._peek() == "lparen":
            self._take("lparen")
            inner = self._or()
            self._take("rparen")
            return inner
        name = self._take("ident")
        op = self._take("op")
        kind = self._peek()
        if kind not in ("string", "number", "ident"):
            msg = f"Expected a literal after {name} {op}"
            raise StoreError(msg, status=400)
        value = _literal(kind, self._take(kind))
        return lambda record: _compare(op, _field_value(record, name), value)


def compile_filter(expr: str | None) -> _Predicate:
    """Compile a filter expression into a record predicate.

    Raises:
        StoreError: (status 400) when *expr* is malformed.
    """
    return _FilterParser(expr or "").parse()


def _sort_records(records: list[dict[str, Any]], sort: str | None) -> list[dict[str, Any]]:
    if not sort:
        return records
    ordered = list(records)
    # Stable sorts applied from the least to the most significant field.
    for spec in reversed([s.strip() for s in sort.split(",") if s.strip()]):
        descending = spec.startswith("-")
        name = spec.lstrip("+-")

        def key(record: dict[str, Any], name: str = name) -> tuple[bool, Any]:
            value = _field_value(record, name)
            return (value is None, value if value is not None else "")

        ordered.sort(key=key, reverse=descending)
    return ordered


#########
# Store #
#########


class InMemoryRecordStore(RecordStore):
    """In-process record store for tests and local development.

    Args:
        admins: ``email → password`` pairs accepted by
            :meth:`authenticate_admin`.
        relations: Extra ``field → collection`` mappings for ``expand``.
        require_auth: Reject queries and writes without a valid admin token.
        token_ttl: Lifetime of issued admin tokens in seconds.

    Example::

        store = InMemoryRecordStore(admins={"admin@example.com": "secret"})
        await store.authenticate_admin("admin@example.com", "secret")
        site = await store.create("sites", {"name": "1dun"})
        await store.create("domains", {"hostname": "1dun.co", "site": site["id"]})
    """

    def __init__(
        self,
        admins: dict[str, str] | None = None,
        relations: dict[str, str] | None = None,
        require_auth: bool = True,
        token_ttl: int = 3600,
    ) -> None:
        super().__init__()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._admins: dict[str, str] = dict(admins or {})
        self._relations = {**DEFAULT_RELATIONS, **(relations or {})}
        self._require_auth = require_auth
        self._token_ttl = token_ttl
        self._signing_key = generate_signing_key()
        self._last_created: datetime | None = None
        self._lock = asyncio.Lock()
        logger.debug("InMemoryRecordStore initialised")

    ##################
    # Authentication #
    ##################

    def issue_admin_token(self, email: str, ttl: int | None = None) -> str:
        """Issue a token as if *email* had logged in (for token-mode tests)."""
        return issue_token(email, self._signing_key, ttl=ttl or self._token_ttl, type="admin")

    async def authenticate_admin(self, email: str, password: str) -> AdminAuth:
        expected = self._admins.get(email)
        if expected is None or not secrets.compare_digest(expected, password):
            raise AuthenticationError("Failed to authenticate.", status=400)
        auth = AdminAuth(token=self.issue_admin_token(email), admin={"email": email})
        self._auth_token = auth.token
        return auth

    def _check_auth(self) -> None:
        if not self._require_auth:
            return
        if not self._auth_token:
            raise StoreError("Only admins can perform this action.", status=403)
        try:
            jwt.decode(self._auth_token, self._signing_key, algorithms=["HS256"])
        except JWTError as exc:
            raise StoreError("The request requires valid admin authorization.", status=401) from exc

    ###########
    # Queries #
    ###########

    def _expand(self, record: dict[str, Any], expand: str | None) -> dict[str, Any]:
        result = copy.deepcopy(record)
        if not expand:
            return result
        expanded: dict[str, Any] = {}
        for name in (n.strip() for n in expand.split(",")):
            target = self._collections.get(self._relations.get(name, ""), {})
            value = record.get(name)
            if isinstance(value, str) and value in target:
                expanded[name] = copy.deepcopy(target[value])
            elif isinstance(value, list):
                found = [copy.deepcopy(target[v]) for v in value if v in target]
                if found:
                    expanded[name] = found
        if expanded:
            result["expand"] = expanded
        return result

    def _matching(self, collection: str, filter: str | None, sort: str | None) -> list[dict[str, Any]]:  # noqa: A002
        predicate = compile_filter(filter)
        records = [r for r in self._collections.get(collection, {}).values() if predicate(r)]
        return _sort_records(records, sort)

    async def list(
        self,
        collection: str,
        page: int = 1,
        per_page: int = 30,
        *,
        filter: str | None = None,  # noqa: A002
        sort: str | None = None,
        expand: str | None = None,
    ) -> RecordPage:
        self._check_auth()
        page = max(page, 1)
        matches = self._matching(collection, filter, sort)
        start = (page - 1) * per_page
        return RecordPage(
            page=page,
            per_page=per_page,
            total_items=len(matches),
            items=[self._expand(r, expand) for r in matches[start : start + per_page]],
        )

    async def find_first(
        self,
        collection: str,
        filter: str,  # noqa: A002
        *,
        expand: str | None = None,
    ) -> dict[str, Any]:
        self._check_auth()
        matches = self._matching(collection, filter, None)
        if not matches:
            raise RecordNotFoundError(collection, filter)
        return self._expand(matches[0], expand)

    ##########
    # Writes #
    ##########

    def _next_created(self) -> datetime:
        now = datetime.now(UTC)
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        if self._last_created is not None and now <= self._last_created:
            now = self._last_created + timedelta(milliseconds=1)
        self._last_created = now
        return now

    async def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        self._check_auth()
        async with self._lock:
            records = self._collections.setdefault(collection, {})
            record = copy.deepcopy(data)
            record_id = record.get("id") or _new_id()
            if record_id in records:
                msg = f"Record {record_id!r} already exists in {collection!r}"
                raise StoreError(msg, status=400)
            stamp = _format_timestamp(self._next_created())
            record["id"] = record_id
            record.setdefault("created", stamp)
            record.setdefault("updated", stamp)
            record.setdefault("collectionName", collection)
            records[record_id] = record
        logger.debug("Created record collection=%s id=%s", collection, record_id)
        return copy.deepcopy(record)

    async def update(
        self,
        collection: str,
        record_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        self._check_auth()
        async with self._lock:
            records = self._collections.get(collection, {})
            if record_id not in records:
                raise RecordNotFoundError(collection)
            record = records[record_id]
            record.update({k: copy.deepcopy(v) for k, v in data.items() if k != "id"})
            record["updated"] = _format_timestamp(datetime.now(UTC))
        return copy.deepcopy(record)

    async def delete(self, collection: str, record_id: str) -> None:
        """Remove a record (used by tests to break relations)."""
        self._check_auth()
        async with self._lock:
            if self._collections.get(collection, {}).pop(record_id, None) is None:
                raise RecordNotFoundError(collection)

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))

    def clear(self) -> None:
        self._collections.clear()


__all__ = ["DEFAULT_RELATIONS", "InMemoryRecordStore", "compile_filter"]
