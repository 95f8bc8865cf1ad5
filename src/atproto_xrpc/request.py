"""XRPC request descriptors."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_json

from .codec import encode_datetime
from .errors import InvalidRequestURLError
from .query import QueryItems, encode_query, parse_base_url

ACCEPT_JSON = "application/json"
ACCEPT_CAR = "application/vnd.ipld.car"
CONTENT_TYPE_JSON = "application/json"

_METHOD_ID = re.compile(r"^[A-Za-z][A-Za-z0-9-]*(\.[A-Za-z0-9-]+)+\.[A-Za-z][A-Za-z0-9]*$")


@dataclass(frozen=True, slots=True)
class XrpcRequest:
    url: str
    method: str
    accept: str = ACCEPT_JSON
    content_type: str | None = None
    authorization: str | None = None
    body: bytes | None = None

    def headers(self) -> dict[str, str]:
        headers = {"Accept": self.accept}
        if self.content_type is not None:
            headers["Content-Type"] = self.content_type
        if self.authorization is not None:
            headers["Authorization"] = self.authorization
        return headers


def is_method_id(value: str) -> bool:
    return bool(_METHOD_ID.match(value))


def _wire_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return encode_datetime(value)
    if isinstance(value, Mapping):
        return {key: _wire_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_wire_value(item) for item in value]
    return value


def encode_body(body: Any) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    if isinstance(body, Mapping):
        payload = {key: _wire_value(value) for key, value in body.items() if value is not None}
        return to_json(payload, by_alias=True, exclude_none=True)
    raise TypeError(f"unsupported request body type {type(body).__name__}")


def build_request(
    base_url: str | None,
    method_id: str,
    *,
    http_method: str = "GET",
    query: QueryItems | None = None,
    accept: str = ACCEPT_JSON,
    content_type: str | None = None,
    authorization: str | None = None,
    body: Any | None = None,
) -> XrpcRequest:
    host = parse_base_url(base_url)
    if host.query or host.fragment:
        raise InvalidRequestURLError(f"host URL {base_url!r} must not carry a query or fragment")
    if not is_method_id(method_id):
        raise InvalidRequestURLError(f"invalid XRPC method id {method_id!r}")

    endpoint = f"{base_url.strip().rstrip('/')}/xrpc/{method_id}"
    url = encode_query(endpoint, query)

    encoded = encode_body(body)
    if encoded is not None and content_type is None and not isinstance(body, bytes):
        content_type = CONTENT_TYPE_JSON

    return XrpcRequest(
        url=url,
        method=http_method.upper(),
        accept=accept,
        content_type=content_type,
        authorization=authorization,
        body=encoded,
    )
