from __future__ import annotations

import asyncio

import pytest

from atproto_xrpc.dispatch import XrpcCall
from atproto_xrpc.hooks import HookRegistry, is_method_pattern, method_patterns


def _call(method_id: str = "com.atproto.sync.getLatestCommit") -> XrpcCall:
    return XrpcCall(method_id=method_id)


def test_sync_registry_rejects_async_hooks() -> None:
    registry = HookRegistry()

    async def before(_call: XrpcCall) -> None:
        return None

    registry.add_before("*", before)
    with pytest.raises(TypeError):
        registry.run_before(_call())


@pytest.mark.asyncio
async def test_async_registry_executes_async_hooks() -> None:
    registry = HookRegistry()
    events: list[str] = []

    async def before(_call: XrpcCall) -> None:
        await asyncio.sleep(0)
        events.append("before")

    async def after(_call: XrpcCall, _response: object) -> None:
        await asyncio.sleep(0)
        events.append("after")

    registry.add_before("*", before)
    registry.add_after("*", after)

    call = _call()
    await registry.run_before_async(call)
    await registry.run_after_async(call, {"ok": True})

    assert events == ["before", "after"]


def test_wildcard_hooks_run_before_exact_method_hooks() -> None:
    registry = HookRegistry()
    events: list[str] = []

    registry.add_before("com.atproto.sync.getBlocks", lambda _call: events.append("exact"))
    registry.add_before("*", lambda _call: events.append("wildcard"))
    registry.add_before("app.bsky.graph.getLists", lambda _call: events.append("other"))

    registry.run_before(_call("com.atproto.sync.getBlocks"))

    assert events == ["wildcard", "exact"]


def test_sync_registry_executes_middleware_in_order() -> None:
    registry = HookRegistry()
    events: list[str] = []

    class Middleware:
        def before(self, _call: XrpcCall) -> None:
            events.append("mw.before")

        def after(self, _call: XrpcCall, _response: object) -> None:
            events.append("mw.after")

        def on_error(self, _call: XrpcCall, _error: Exception) -> None:
            events.append("mw.error")

    registry.add_middleware("*", Middleware())
    call = _call()
    registry.run_before(call)
    registry.run_after(call, {"ok": True})
    registry.run_error(call, RuntimeError("boom"))

    assert events == ["mw.before", "mw.after", "mw.error"]


def test_middleware_without_callable_hook_is_rejected() -> None:
    registry = HookRegistry()

    class Incomplete:
        def before(self, _call: XrpcCall) -> None:
            return None

    with pytest.raises(TypeError):
        registry.add_middleware("*", Incomplete())  # type: ignore[arg-type]


def test_method_patterns_run_from_broadest_to_exact() -> None:
    assert list(method_patterns("app.bsky.feed.getFeedSkeleton")) == [
        "*",
        "app.*",
        "app.bsky.*",
        "app.bsky.feed.*",
        "app.bsky.feed.getFeedSkeleton",
    ]


def test_namespace_hooks_match_every_method_below_them() -> None:
    registry = HookRegistry()
    events: list[str] = []

    registry.add_before("app.bsky.feed.getFeedSkeleton", lambda call: events.append(f"exact:{call.method_id}"))
    registry.add_before("app.bsky.feed.*", lambda call: events.append(f"feed:{call.method_id}"))
    registry.add_before("app.*", lambda call: events.append(f"app:{call.method_id}"))
    registry.add_before("*", lambda call: events.append(f"any:{call.method_id}"))
    registry.add_before("com.atproto.*", lambda call: events.append(f"atproto:{call.method_id}"))

    registry.run_before(_call("app.bsky.feed.getFeedSkeleton"))
    registry.run_before(_call("app.bsky.graph.getLists"))

    assert events == [
        "any:app.bsky.feed.getFeedSkeleton",
        "app:app.bsky.feed.getFeedSkeleton",
        "feed:app.bsky.feed.getFeedSkeleton",
        "exact:app.bsky.feed.getFeedSkeleton",
        "any:app.bsky.graph.getLists",
        "app:app.bsky.graph.getLists",
    ]


def test_namespace_pattern_does_not_match_sibling_prefix() -> None:
    registry = HookRegistry()
    events: list[str] = []

    registry.add_after("app.bsky.feed.*", lambda call, _response: events.append(call.method_id))
    registry.run_after(_call("app.bsky.feedgen.describe"), None)

    assert events == []


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("*", True),
        ("app.*", True),
        ("tools.ozone.set.*", True),
        ("com.atproto.sync.getBlocks", True),
        ("app.bsky.*.get", False),
        ("app.bsky.feed.", False),
        (".*", False),
        ("", False),
    ],
)
def test_is_method_pattern(pattern: str, expected: bool) -> None:
    assert is_method_pattern(pattern) is expected


def test_invalid_pattern_is_rejected_at_registration() -> None:
    registry = HookRegistry()

    with pytest.raises(ValueError):
        registry.add_error("app.bsky.*.get", lambda _call, _error: None)
