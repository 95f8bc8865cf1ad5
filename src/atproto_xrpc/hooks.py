"""Request hooks for atproto-xrpc clients.

Hooks are registered against a method pattern:

* an exact NSID, ``app.bsky.feed.getFeedSkeleton``
* a namespace, ``app.bsky.feed.*``, matching every method below it
* ``*``, matching every call

For a given call, ``*`` hooks run first, then namespace hooks from the
broadest namespace to the narrowest, then hooks for the exact NSID.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from .protocols import AsyncHookMiddleware, SyncHookMiddleware
from .request import is_method_id

if TYPE_CHECKING:
    from .dispatch import XrpcCall

BeforeHook = Callable[["XrpcCall"], None | Awaitable[None]]
AfterHook = Callable[["XrpcCall", Any], None | Awaitable[None]]
ErrorHook = Callable[["XrpcCall", Exception], None | Awaitable[None]]

HookStage = Literal["before", "after", "error"]

ANY_METHOD = "*"
_NAMESPACE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*(\.[A-Za-z0-9-]+)*\.\*$")


def is_method_pattern(pattern: str) -> bool:
    return pattern == ANY_METHOD or bool(_NAMESPACE.match(pattern)) or is_method_id(pattern)


def method_patterns(method_id: str) -> Iterator[str]:
    """Yield every pattern that matches ``method_id``, broadest first."""

    yield ANY_METHOD
    segments = method_id.split(".")
    for depth in range(1, len(segments)):
        yield ".".join(segments[:depth]) + ".*"
    yield method_id


@dataclass(slots=True)
class HookRegistry:
    """Hooks observe calls and failures; a failure is always re-raised after the error hooks ran."""

    _hooks: dict[HookStage, dict[str, list[Callable[..., Any]]]] = field(
        default_factory=lambda: {"before": {}, "after": {}, "error": {}}
    )

    def add_before(self, pattern: str, hook: BeforeHook) -> None:
        self._add("before", pattern, hook)

    def add_after(self, pattern: str, hook: AfterHook) -> None:
        self._add("after", pattern, hook)

    def add_error(self, pattern: str, hook: ErrorHook) -> None:
        self._add("error", pattern, hook)

    def add_middleware(self, pattern: str, middleware: SyncHookMiddleware | AsyncHookMiddleware) -> None:
        hooks = [_require_hook_callable(middleware, name) for name in ("before", "after", "on_error")]
        for stage, hook in zip(("before", "after", "error"), hooks):
            self._add(stage, pattern, hook)

    def hooks_for(self, stage: HookStage, method_id: str) -> list[Callable[..., Any]]:
        table = self._hooks[stage]
        return [hook for pattern in method_patterns(method_id) for hook in table.get(pattern, ())]

    def run_before(self, call: XrpcCall) -> None:
        self._run_sync("before", call)

    def run_after(self, call: XrpcCall, response: Any) -> None:
        self._run_sync("after", call, response)

    def run_error(self, call: XrpcCall, error: Exception) -> None:
        self._run_sync("error", call, error)

    async def run_before_async(self, call: XrpcCall) -> None:
        await self._run_async("before", call)

    async def run_after_async(self, call: XrpcCall, response: Any) -> None:
        await self._run_async("after", call, response)

    async def run_error_async(self, call: XrpcCall, error: Exception) -> None:
        await self._run_async("error", call, error)

    def _add(self, stage: HookStage, pattern: str, hook: Callable[..., Any]) -> None:
        if not is_method_pattern(pattern):
            raise ValueError(f"invalid hook pattern {pattern!r}; expected an NSID, a namespace ending in '.*', or '*'")
        self._hooks[stage].setdefault(pattern, []).append(hook)

    def _run_sync(self, stage: HookStage, call: XrpcCall, *args: Any) -> None:
        for hook in self.hooks_for(stage, call.method_id):
            result = hook(call, *args)
            if inspect.isawaitable(result):
                # Close the coroutine so it is not reported as never awaited.
                close = getattr(result, "close", None)
                if callable(close):
                    close()
                raise TypeError(f"sync clients cannot execute async {stage} hooks")

    async def _run_async(self, stage: HookStage, call: XrpcCall, *args: Any) -> None:
        for hook in self.hooks_for(stage, call.method_id):
            result = hook(call, *args)
            if inspect.isawaitable(result):
                await result


def _require_hook_callable(middleware: object, name: str) -> Callable[..., Any]:
    hook = getattr(middleware, name, None)
    if not callable(hook):
        raise TypeError(f"hook middleware must provide callable {name}()")
    return hook
