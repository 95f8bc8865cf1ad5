"""Protocol contracts for atproto-xrpc client extension points."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .dispatch import XrpcCall
    from .request import XrpcRequest
    from .transport import XrpcResponse


@runtime_checkable
class SyncRequestExecutor(Protocol):
    def send(self, request: XrpcRequest) -> XrpcResponse: ...


@runtime_checkable
class AsyncRequestExecutor(Protocol):
    async def send(self, request: XrpcRequest) -> XrpcResponse: ...


@runtime_checkable
class SyncHookMiddleware(Protocol):
    def before(self, call: XrpcCall) -> None: ...

    def after(self, call: XrpcCall, response: Any) -> None: ...

    def on_error(self, call: XrpcCall, error: Exception) -> None: ...


@runtime_checkable
class AsyncHookMiddleware(Protocol):
    async def before(self, call: XrpcCall) -> None: ...

    async def after(self, call: XrpcCall, response: Any) -> None: ...

    async def on_error(self, call: XrpcCall, error: Exception) -> None: ...
