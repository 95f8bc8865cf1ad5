"""Generic XRPC call preparation and response classification.

Every endpoint goes through the same two steps around the transport:
``prepare_request`` turns an ``XrpcCall`` into an ``XrpcRequest`` (failing
before any I/O when no host or session is available), and
``interpret_response`` maps the transport's ``XrpcResponse`` to a decoded
value, raw bytes, or a typed ``ApiError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .decoder import decode_response, parse_error_body
from .errors import InvalidRequestURLError, RequestDetails, classify_api_error
from .request import ACCEPT_CAR, ACCEPT_JSON, XrpcRequest, build_request
from .session import AuthMode, SessionContext
from .transport import XrpcResponse


@dataclass(slots=True)
class XrpcCall:
    method_id: str
    http_method: str = "GET"
    query: Sequence[tuple[str, Any]] = field(default_factory=list)
    body: Any | None = None
    output: Any | None = None
    accept: str = ACCEPT_JSON
    content_type: str | None = None
    auth: AuthMode = "none"
    pds_url: str | None = None
    raw: bool = False

    @classmethod
    def query_call(
        cls,
        method_id: str,
        *,
        query: Sequence[tuple[str, Any]] = (),
        output: Any | None = None,
        auth: AuthMode = "none",
        pds_url: str | None = None,
    ) -> XrpcCall:
        return cls(method_id=method_id, query=list(query), output=output, auth=auth, pds_url=pds_url)

    @classmethod
    def procedure_call(
        cls,
        method_id: str,
        *,
        body: Any | None = None,
        output: Any | None = None,
        auth: AuthMode = "none",
        pds_url: str | None = None,
    ) -> XrpcCall:
        return cls(
            method_id=method_id,
            http_method="POST",
            body=body,
            output=output,
            auth=auth,
            pds_url=pds_url,
        )

    @classmethod
    def car_call(
        cls,
        method_id: str,
        *,
        query: Sequence[tuple[str, Any]] = (),
        auth: AuthMode = "none",
        pds_url: str | None = None,
    ) -> XrpcCall:
        return cls(
            method_id=method_id,
            query=list(query),
            accept=ACCEPT_CAR,
            auth=auth,
            pds_url=pds_url,
            raw=True,
        )


def prepare_request(context: SessionContext, call: XrpcCall) -> XrpcRequest:
    if call.auth in ("required", "refresh") and call.pds_url is not None:
        # Tokens are bound to the session host.
        raise InvalidRequestURLError(f"{call.method_id} requires the session host and does not accept pds_url")

    host, authorization = context.resolve(call.auth, call.pds_url)
    return build_request(
        host,
        call.method_id,
        http_method=call.http_method,
        query=call.query,
        accept=call.accept,
        content_type=call.content_type,
        authorization=authorization,
        body=call.body,
    )


def interpret_response(call: XrpcCall, request: XrpcRequest, response: XrpcResponse) -> Any:
    if not response.is_success:
        details = RequestDetails(
            method_id=call.method_id,
            method=request.method,
            url=request.url,
            status_code=response.status_code,
            response_body=response.content,
        )
        parsed = parse_error_body(response.content)
        if parsed is None:
            raise classify_api_error(details)
        raise classify_api_error(details, error=parsed.error, error_message=parsed.message)

    if call.raw:
        return response.content
    if call.output is None:
        return None
    return decode_response(
        response.content,
        call.output,
        method_id=call.method_id,
        status_code=response.status_code,
    )
