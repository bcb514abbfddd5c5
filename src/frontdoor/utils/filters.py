"""Filter-expression builder for record-store queries.

The store accepts filters as strings such as::

    hostname = "1dun.co" && (status = "active" || status = "verified")

Host headers are untrusted input, so values are never spliced into a filter
by hand.  Every literal goes through :func:`quote` (JSON string encoding,
which escapes quotes and backslashes) and every field name must match
:data:`_FIELD_RE`.

Example::

    from frontdoor.utils import filters as f

    expr = f.all_of(
        f.eq("hostname", host),
        f.any_of(f.eq("status", "active"), f.eq("status", "verified")),
    )
"""

from __future__ import annotations

import json
import re
from typing import Any

# Field names: letters, digits, underscores, with dotted relation paths.
_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def field(name: str) -> str:
    """Validate and return a field name.

    Raises:
        ValueError: When *name* is not a plain (optionally dotted) identifier.
    """
    if not _FIELD_RE.match(name):
        msg = f"Invalid filter field name: {name!r}"
        raise ValueError(msg)
    return name


def quote(value: Any) -> str:
    """Encode *value* as a filter literal.

    Strings become JSON strings; ``bool`` / ``None`` / numbers use their JSON
    spelling.  Anything else is stringified first.
    """
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return json.dumps(str(value), ensure_ascii=False)


def eq(name: str, value: Any) -> str:
    """``name = value``"""
    return f"{field(name)} = {quote(value)}"


def ne(name: str, value: Any) -> str:
    """``name != value``"""
    return f"{field(name)} != {quote(value)}"


def all_of(*clauses: str) -> str:
    """Join non-empty *clauses* with ``&&``."""
    return " && ".join(c for c in clauses if c)


def any_of(*clauses: str) -> str:
    """Join non-empty *clauses* with ``||`` inside parentheses."""
    parts = [c for c in clauses if c]
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return "(" + " || ".join(parts) + ")"


def one_of(name: str, values: Any) -> str:
    """``(name = v1 || name = v2 ...)``"""
    return any_of(*(eq(name, v) for v in values))


__all__ = ["all_of", "any_of", "eq", "field", "ne", "one_of", "quote"]
