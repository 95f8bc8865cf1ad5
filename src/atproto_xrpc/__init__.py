"""atproto-xrpc: typed AT Protocol XRPC client.

This module uses lazy exports so lightweight utilities (for example the wire
codec helpers) can be imported without immediately importing transport
dependencies.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "ApiError",
    "AsyncHookMiddleware",
    "AsyncRequestExecutor",
    "AsyncXrpcClient",
    "AuthError",
    "BadRequestError",
    "ClientConfig",
    "ClientTimeoutError",
    "DateDecodingError",
    "DecodingError",
    "HookRegistry",
    "InvalidRequestURLError",
    "MissingActiveSessionError",
    "NotFoundError",
    "PayloadTooLargeError",
    "RateLimitError",
    "RequestPrepareError",
    "ServerError",
    "Session",
    "SessionContext",
    "SyncHookMiddleware",
    "SyncRequestExecutor",
    "TransportError",
    "XrpcCall",
    "XrpcClient",
    "XrpcError",
    "XrpcRequest",
    "XrpcResponse",
]

_EXPORTS: dict[str, tuple[str, str]] = {
    "AsyncXrpcClient": (".client", "AsyncXrpcClient"),
    "XrpcClient": (".client", "XrpcClient"),
    "ClientConfig": (".config", "ClientConfig"),
    "XrpcCall": (".dispatch", "XrpcCall"),
    "ApiError": (".errors", "ApiError"),
    "AuthError": (".errors", "AuthError"),
    "BadRequestError": (".errors", "BadRequestError"),
    "ClientTimeoutError": (".errors", "ClientTimeoutError"),
    "DateDecodingError": (".errors", "DateDecodingError"),
    "DecodingError": (".errors", "DecodingError"),
    "InvalidRequestURLError": (".errors", "InvalidRequestURLError"),
    "MissingActiveSessionError": (".errors", "MissingActiveSessionError"),
    "NotFoundError": (".errors", "NotFoundError"),
    "PayloadTooLargeError": (".errors", "PayloadTooLargeError"),
    "RateLimitError": (".errors", "RateLimitError"),
    "RequestPrepareError": (".errors", "RequestPrepareError"),
    "ServerError": (".errors", "ServerError"),
    "TransportError": (".errors", "TransportError"),
    "XrpcError": (".errors", "XrpcError"),
    "HookRegistry": (".hooks", "HookRegistry"),
    "AsyncHookMiddleware": (".protocols", "AsyncHookMiddleware"),
    "AsyncRequestExecutor": (".protocols", "AsyncRequestExecutor"),
    "SyncHookMiddleware": (".protocols", "SyncHookMiddleware"),
    "SyncRequestExecutor": (".protocols", "SyncRequestExecutor"),
    "XrpcRequest": (".request", "XrpcRequest"),
    "Session": (".session", "Session"),
    "SessionContext": (".session", "SessionContext"),
    "XrpcResponse": (".transport", "XrpcResponse"),
}

if TYPE_CHECKING:
    from .client import AsyncXrpcClient, XrpcClient
    from .config import ClientConfig
    from .dispatch import XrpcCall
    from .errors import (
        ApiError,
        AuthError,
        BadRequestError,
        ClientTimeoutError,
        DateDecodingError,
        DecodingError,
        InvalidRequestURLError,
        MissingActiveSessionError,
        NotFoundError,
        PayloadTooLargeError,
        RateLimitError,
        RequestPrepareError,
        ServerError,
        TransportError,
        XrpcError,
    )
    from .hooks import HookRegistry
    from .protocols import AsyncHookMiddleware, AsyncRequestExecutor, SyncHookMiddleware, SyncRequestExecutor
    from .request import XrpcRequest
    from .session import Session, SessionContext
    from .transport import XrpcResponse


def __getattr__(name: str) -> Any:
    module_info = _EXPORTS.get(name)
    if module_info is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute = module_info
    module = import_module(module_name, __name__)
    value = getattr(module, attribute)
    globals()[name] = value
    return value
