"""HTTP transport for atproto-xrpc client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from .errors import ClientTimeoutError, TransportError
from .request import XrpcRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class XrpcResponse:
    status_code: int
    content: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def _to_response(response: httpx.Response) -> XrpcResponse:
    return XrpcResponse(
        status_code=response.status_code,
        content=response.content,
        headers={key.lower(): value for key, value in response.headers.items()},
    )


class SyncTransport:
    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def send(self, request: XrpcRequest) -> XrpcResponse:
        logger.debug("sending %s %s", request.method, request.url)
        try:
            response = self._client.request(
                request.method,
                request.url,
                content=request.body,
                headers=request.headers(),
            )
        except httpx.TimeoutException as error:
            raise ClientTimeoutError(str(error)) from error
        except httpx.HTTPError as error:
            raise TransportError(str(error)) from error

        logger.debug("received %s for %s %s", response.status_code, request.method, request.url)
        return _to_response(response)


class AsyncTransport:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, request: XrpcRequest) -> XrpcResponse:
        logger.debug("sending %s %s", request.method, request.url)
        try:
            response = await self._client.request(
                request.method,
                request.url,
                content=request.body,
                headers=request.headers(),
            )
        except httpx.TimeoutException as error:
            raise ClientTimeoutError(str(error)) from error
        except httpx.HTTPError as error:
            raise TransportError(str(error)) from error

        logger.debug("received %s for %s %s", response.status_code, request.method, request.url)
        return _to_response(response)
