"""Top-level atproto-xrpc clients (sync + async)."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable

import httpx

from .api import FeedApi, GraphApi, OzoneSetApi, RawApi, ServerApi, SyncApi, UnspeccedApi
from .config import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT, ClientConfig, normalize_pds_url
from .dispatch import XrpcCall, interpret_response, prepare_request
from .hooks import HookRegistry
from .models import CreateSessionOutput, RefreshSessionOutput
from .protocols import AsyncHookMiddleware, AsyncRequestExecutor, SyncHookMiddleware, SyncRequestExecutor
from .session import Session, SessionContext
from .transport import AsyncTransport, SyncTransport

logger = logging.getLogger(__name__)


def _pds_from_did_doc(did_doc: dict[str, Any] | None) -> str | None:
    if not isinstance(did_doc, dict):
        return None
    services = did_doc.get("service")
    if not isinstance(services, list):
        return None
    for service in services:
        if not isinstance(service, dict):
            continue
        if service.get("id") == "#atproto_pds" and service.get("type") == "AtprotoPersonalDataServer":
            endpoint = service.get("serviceEndpoint")
            if isinstance(endpoint, str) and endpoint.strip():
                return normalize_pds_url(endpoint)
    return None


def _session_from_login(host: str, output: CreateSessionOutput) -> Session:
    return Session(
        pds_url=_pds_from_did_doc(output.did_doc) or normalize_pds_url(host),
        access_token=output.access_jwt,
        refresh_token=output.refresh_jwt,
        did=output.did,
        handle=output.handle,
    )


def _session_from_refresh(current: Session | None, output: RefreshSessionOutput) -> Session:
    host = current.pds_url if current is not None else None
    return Session(
        pds_url=_pds_from_did_doc(output.did_doc) or host,
        access_token=output.access_jwt,
        refresh_token=output.refresh_jwt,
        did=output.did,
        handle=output.handle,
    )


def _anonymous(current: Session | None) -> Session | None:
    if current is None or not current.pds_url:
        return None
    return Session(pds_url=current.pds_url)


def _initial_context(config: ClientConfig, session_context: SessionContext | None) -> SessionContext:
    if session_context is not None:
        return session_context
    return SessionContext(Session(pds_url=config.pds_url) if config.pds_url else None)


class XrpcClient:
    """Synchronous AT Protocol XRPC client."""

    def __init__(
        self,
        *,
        pds_url: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: dict[str, str] | None = None,
        http_client: httpx.Client | None = None,
        request_executor: SyncRequestExecutor | None = None,
        session_context: SessionContext | None = None,
        hook_registry: HookRegistry | None = None,
    ) -> None:
        self.client_config = ClientConfig(
            pds_url=pds_url,
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
            headers=dict(headers or {}),
        )
        self.session_context = _initial_context(self.client_config, session_context)
        self._hooks = hook_registry or HookRegistry()
        self._session_lock = threading.Lock()

        self._client = http_client or httpx.Client(
            timeout=self.client_config.timeout_seconds,
            headers=self.client_config.http_headers(),
        )
        self._transport = SyncTransport(self._client)
        self._executor = request_executor or self._transport

        self.sync = SyncApi(self._request)
        self.server = ServerApi(self._request)
        self.feed = FeedApi(self._request)
        self.graph = GraphApi(self._request)
        self.unspecced = UnspeccedApi(self._request)
        self.ozone_set = OzoneSetApi(self._request)
        self.raw = RawApi(self._request)

    @classmethod
    def from_env(cls) -> "XrpcClient":
        cfg = ClientConfig.from_env()
        return cls(
            pds_url=cfg.pds_url,
            timeout_seconds=cfg.timeout_seconds,
            user_agent=cfg.user_agent,
        )

    @property
    def session(self) -> Session | None:
        return self.session_context.current

    def login(
        self,
        identifier: str,
        password: str,
        *,
        pds_url: str | None = None,
        auth_factor_token: str | None = None,
    ) -> CreateSessionOutput:
        with self._session_lock:
            host = self.session_context.resolve_host(pds_url)
            output = self.server.create_session(
                identifier,
                password,
                auth_factor_token=auth_factor_token,
                pds_url=host,
            )
            self.session_context.replace(_session_from_login(host, output))
        logger.debug("session established for %s", output.did)
        return output

    def refresh(self) -> RefreshSessionOutput:
        with self._session_lock:
            output = self.server.refresh_session()
            self.session_context.replace(_session_from_refresh(self.session_context.current, output))
        logger.debug("session refreshed for %s", output.did)
        return output

    def logout(self) -> None:
        with self._session_lock:
            self.server.delete_session()
            self.session_context.replace(_anonymous(self.session_context.current))

    def before(self, pattern: str = "*") -> Callable[[Callable[[XrpcCall], Any]], Callable[[XrpcCall], Any]]:
        def decorator(func: Callable[[XrpcCall], Any]) -> Callable[[XrpcCall], Any]:
            self._hooks.add_before(pattern, func)
            return func

        return decorator

    def after(self, pattern: str = "*") -> Callable[[Callable[[XrpcCall, Any], Any]], Callable[[XrpcCall, Any], Any]]:
        def decorator(func: Callable[[XrpcCall, Any], Any]) -> Callable[[XrpcCall, Any], Any]:
            self._hooks.add_after(pattern, func)
            return func

        return decorator

    def on_error(self, pattern: str = "*") -> Callable[[Callable[[XrpcCall, Exception], Any]], Callable[[XrpcCall, Exception], Any]]:
        def decorator(func: Callable[[XrpcCall, Exception], Any]) -> Callable[[XrpcCall, Exception], Any]:
            self._hooks.add_error(pattern, func)
            return func

        return decorator

    def use_middleware(self, middleware: SyncHookMiddleware | AsyncHookMiddleware, *, pattern: str = "*") -> None:
        self._hooks.add_middleware(pattern, middleware)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "XrpcClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, call: XrpcCall) -> Any:
        self._hooks.run_before(call)
        try:
            request = prepare_request(self.session_context, call)
            response = self._executor.send(request)
            result = interpret_response(call, request, response)
        except Exception as error:
            self._hooks.run_error(call, error)
            raise

        self._hooks.run_after(call, result)
        return result


class AsyncXrpcClient:
    """Asynchronous AT Protocol XRPC client.

    Calls made through one client may run concurrently. ``login``,
    ``refresh`` and ``logout`` are serialized against each other.
    """

    def __init__(
        self,
        *,
        pds_url: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        request_executor: AsyncRequestExecutor | None = None,
        session_context: SessionContext | None = None,
        hook_registry: HookRegistry | None = None,
    ) -> None:
        self.client_config = ClientConfig(
            pds_url=pds_url,
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
            headers=dict(headers or {}),
        )
        self.session_context = _initial_context(self.client_config, session_context)
        self._hooks = hook_registry or HookRegistry()
        self._session_lock = asyncio.Lock()

        self._client = http_client or httpx.AsyncClient(
            timeout=self.client_config.timeout_seconds,
            headers=self.client_config.http_headers(),
        )
        self._transport = AsyncTransport(self._client)
        self._executor = request_executor or self._transport

        self.sync = SyncApi(self._request)
        self.server = ServerApi(self._request)
        self.feed = FeedApi(self._request)
        self.graph = GraphApi(self._request)
        self.unspecced = UnspeccedApi(self._request)
        self.ozone_set = OzoneSetApi(self._request)
        self.raw = RawApi(self._request)

    @classmethod
    def from_env(cls) -> "AsyncXrpcClient":
        cfg = ClientConfig.from_env()
        return cls(
            pds_url=cfg.pds_url,
            timeout_seconds=cfg.timeout_seconds,
            user_agent=cfg.user_agent,
        )

    @property
    def session(self) -> Session | None:
        return self.session_context.current

    async def login(
        self,
        identifier: str,
        password: str,
        *,
        pds_url: str | None = None,
        auth_factor_token: str | None = None,
    ) -> CreateSessionOutput:
        async with self._session_lock:
            host = self.session_context.resolve_host(pds_url)
            output = await self.server.create_session(
                identifier,
                password,
                auth_factor_token=auth_factor_token,
                pds_url=host,
            )
            self.session_context.replace(_session_from_login(host, output))
        logger.debug("session established for %s", output.did)
        return output

    async def refresh(self) -> RefreshSessionOutput:
        async with self._session_lock:
            output = await self.server.refresh_session()
            self.session_context.replace(_session_from_refresh(self.session_context.current, output))
        logger.debug("session refreshed for %s", output.did)
        return output

    async def logout(self) -> None:
        async with self._session_lock:
            await self.server.delete_session()
            self.session_context.replace(_anonymous(self.session_context.current))

    def before(self, pattern: str = "*") -> Callable[[Callable[[XrpcCall], Any]], Callable[[XrpcCall], Any]]:
        def decorator(func: Callable[[XrpcCall], Any]) -> Callable[[XrpcCall], Any]:
            self._hooks.add_before(pattern, func)
            return func

        return decorator

    def after(self, pattern: str = "*") -> Callable[[Callable[[XrpcCall, Any], Any]], Callable[[XrpcCall, Any], Any]]:
        def decorator(func: Callable[[XrpcCall, Any], Any]) -> Callable[[XrpcCall, Any], Any]:
            self._hooks.add_after(pattern, func)
            return func

        return decorator

    def on_error(self, pattern: str = "*") -> Callable[[Callable[[XrpcCall, Exception], Any]], Callable[[XrpcCall, Exception], Any]]:
        def decorator(func: Callable[[XrpcCall, Exception], Any]) -> Callable[[XrpcCall, Exception], Any]:
            self._hooks.add_error(pattern, func)
            return func

        return decorator

    def use_middleware(self, middleware: SyncHookMiddleware | AsyncHookMiddleware, *, pattern: str = "*") -> None:
        self._hooks.add_middleware(pattern, middleware)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncXrpcClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _request(self, call: XrpcCall) -> Any:
        await self._hooks.run_before_async(call)
        try:
            request = prepare_request(self.session_context, call)
            response = await self._executor.send(request)
            result = interpret_response(call, request, response)
        except Exception as error:
            await self._hooks.run_error_async(call, error)
            raise

        await self._hooks.run_after_async(call, result)
        return result
