from __future__ import annotations

import httpx
import pytest

from atproto_xrpc.errors import ClientTimeoutError, TransportError
from atproto_xrpc.request import build_request
from atproto_xrpc.transport import AsyncTransport, SyncTransport

PDS = "https://pds.example.com"


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "url": str(request.url),
            "accept": request.headers.get("accept"),
            "authorization": request.headers.get("authorization"),
            "contentType": request.headers.get("content-type"),
            "body": request.content.decode("utf-8"),
        },
    )


def test_sync_transport_sends_descriptor_verbatim() -> None:
    client = httpx.Client(transport=httpx.MockTransport(_echo))
    request = build_request(
        PDS,
        "com.atproto.server.createSession",
        http_method="POST",
        authorization="Bearer token",
        body={"identifier": "alice.test", "password": "pw"},
    )

    try:
        response = SyncTransport(client).send(request)
    finally:
        client.close()

    assert response.status_code == 200
    assert response.is_success
    assert response.content_type == "application/json"
    echoed = httpx.Response(200, content=response.content).json()
    assert echoed["method"] == "POST"
    assert echoed["url"] == f"{PDS}/xrpc/com.atproto.server.createSession"
    assert echoed["accept"] == "application/json"
    assert echoed["authorization"] == "Bearer token"
    assert echoed["contentType"] == "application/json"
    assert echoed["body"] == '{"identifier":"alice.test","password":"pw"}'


def test_sync_transport_keeps_encoded_query() -> None:
    client = httpx.Client(transport=httpx.MockTransport(_echo))
    request = build_request(PDS, "com.atproto.sync.getBlocks", query=[("did", "did:plc:x"), ("cids", "a"), ("cids", "b")])

    try:
        response = SyncTransport(client).send(request)
    finally:
        client.close()

    echoed = httpx.Response(200, content=response.content).json()
    assert echoed["url"] == f"{PDS}/xrpc/com.atproto.sync.getBlocks?did=did%3Aplc%3Ax&cids=a&cids=b"


def test_sync_transport_wraps_connection_failures() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(refuse))
    try:
        with pytest.raises(TransportError) as excinfo:
            SyncTransport(client).send(build_request(PDS, "com.atproto.sync.getLatestCommit"))
    finally:
        client.close()

    assert not isinstance(excinfo.value, ClientTimeoutError)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_async_transport_maps_timeouts() -> None:
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(slow))
    try:
        with pytest.raises(ClientTimeoutError):
            await AsyncTransport(client).send(build_request(PDS, "com.atproto.sync.getLatestCommit"))
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_async_transport_returns_raw_bytes_and_headers() -> None:
    payload = b"\x3a\xa2eroots\x81"

    def car(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=payload, headers={"Content-Type": "application/vnd.ipld.car"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(car))
    try:
        response = await AsyncTransport(client).send(build_request(PDS, "com.atproto.sync.getBlocks"))
    finally:
        await client.aclose()

    assert response.content == payload
    assert response.content_type == "application/vnd.ipld.car"
