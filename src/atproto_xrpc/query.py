"""Query string serialization for XRPC calls."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

import httpx

from .errors import InvalidRequestURLError

QueryItems = Iterable[tuple[str, Any]]


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote(text: str) -> str:
    # quote() always keeps the unreserved set ALPHA / DIGIT / "-" / "." / "_" / "~".
    return quote(text, safe="", encoding="utf-8", errors="strict")


def parse_base_url(base_url: str | None) -> httpx.URL:
    if base_url is None or not base_url.strip():
        raise InvalidRequestURLError("no host URL available for request")

    try:
        url = httpx.URL(base_url.strip())
    except (httpx.InvalidURL, TypeError, ValueError) as error:
        raise InvalidRequestURLError(f"invalid host URL {base_url!r}") from error

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidRequestURLError(f"invalid host URL {base_url!r}")
    return url


def encode_query_items(items: QueryItems | None) -> str:
    """Render ``items`` as ``key=value`` pairs in the given order.

    Repeated keys are written once per value; ``None`` values are skipped.
    """

    if not items:
        return ""

    pairs: list[str] = []
    for key, value in items:
        if value is None:
            continue
        try:
            pairs.append(f"{_quote(str(key))}={_quote(_render_value(value))}")
        except UnicodeEncodeError as error:
            raise InvalidRequestURLError(f"query parameter {key!r} cannot be percent-encoded") from error
    return "&".join(pairs)


def encode_query(base_url: str, items: QueryItems | None) -> str:
    url = parse_base_url(base_url)
    query = encode_query_items(items)
    text = base_url.strip()
    if not query:
        return text
    separator = "&" if url.query else "?"
    return f"{text}{separator}{query}"
