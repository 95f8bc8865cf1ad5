"""Endpoint namespaces.

Each method only shapes parameters into an ``XrpcCall``; the client's request
function does the rest. The same classes back the sync and async clients: the
request function returns a value for the former and an awaitable for the latter.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any, Callable

from .dispatch import XrpcCall
from .models import (
    CreateSessionOutput,
    FeedGetFeedSkeletonOutput,
    GetLatestCommitOutput,
    GetServiceAuthOutput,
    GraphGetListsOutput,
    RefreshSessionOutput,
    SetDefinition,
    SetViewDefinition,
    UnspeccedGetPopularFeedGeneratorsOutput,
)
from .request import ACCEPT_CAR, ACCEPT_JSON
from .session import AuthMode

RequestFn = Callable[[XrpcCall], Any]


def _check_limit(limit: int | None, *, minimum: int = 1, maximum: int = 100) -> int | None:
    if limit is None:
        return None
    if isinstance(limit, bool) or not minimum <= limit <= maximum:
        raise ValueError(f"limit must be between {minimum} and {maximum}, got {limit!r}")
    return limit


class RawApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def call(
        self,
        method_id: str,
        *,
        http_method: str = "GET",
        query: Sequence[tuple[str, Any]] = (),
        body: Any | None = None,
        output: Any | None = None,
        accept: str | None = None,
        content_type: str | None = None,
        auth: AuthMode = "none",
        pds_url: str | None = None,
        raw: bool = False,
    ) -> Any:
        return self._request(
            XrpcCall(
                method_id=method_id,
                http_method=http_method,
                query=list(query),
                body=body,
                output=output,
                accept=accept or (ACCEPT_CAR if raw else ACCEPT_JSON),
                content_type=content_type,
                auth=auth,
                pds_url=pds_url,
                raw=raw,
            )
        )


class SyncApi:
    """``com.atproto.sync`` endpoints. None of them require auth."""

    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def get_latest_commit(self, did: str, *, pds_url: str | None = None) -> Any:
        return self._request(
            XrpcCall.query_call(
                "com.atproto.sync.getLatestCommit",
                query=[("did", did)],
                output=GetLatestCommitOutput,
                pds_url=pds_url,
            )
        )

    def get_blocks(self, did: str, cids: Iterable[str], *, pds_url: str | None = None) -> Any:
        """Fetch blocks by CID. Returns the CAR-encoded response body."""

        query = [("did", did)]
        query.extend(("cids", cid) for cid in cids)
        return self._request(XrpcCall.car_call("com.atproto.sync.getBlocks", query=query, pds_url=pds_url))

    def get_repo(self, did: str, *, since: str | None = None, pds_url: str | None = None) -> Any:
        return self._request(
            XrpcCall.car_call(
                "com.atproto.sync.getRepo",
                query=[("did", did), ("since", since)],
                pds_url=pds_url,
            )
        )


class ServerApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def create_session(
        self,
        identifier: str,
        password: str,
        *,
        auth_factor_token: str | None = None,
        pds_url: str | None = None,
    ) -> Any:
        return self._request(
            XrpcCall.procedure_call(
                "com.atproto.server.createSession",
                body={
                    "identifier": identifier,
                    "password": password,
                    "authFactorToken": auth_factor_token,
                },
                output=CreateSessionOutput,
                pds_url=pds_url,
            )
        )

    def refresh_session(self) -> Any:
        return self._request(
            XrpcCall.procedure_call(
                "com.atproto.server.refreshSession",
                output=RefreshSessionOutput,
                auth="refresh",
            )
        )

    def delete_session(self) -> Any:
        return self._request(XrpcCall.procedure_call("com.atproto.server.deleteSession", auth="refresh"))

    def get_service_auth(
        self,
        aud: str,
        *,
        expires_at: datetime | int | None = None,
        lxm: str | None = None,
    ) -> Any:
        if isinstance(expires_at, datetime):
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            expires_at = int(expires_at.timestamp())
        return self._request(
            XrpcCall.query_call(
                "com.atproto.server.getServiceAuth",
                query=[("aud", aud), ("exp", expires_at), ("lxm", lxm)],
                output=GetServiceAuthOutput,
                auth="required",
            )
        )


class FeedApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def get_feed_skeleton(
        self,
        feed: str,
        *,
        limit: int | None = None,
        cursor: str | None = None,
        pds_url: str | None = None,
    ) -> Any:
        return self._request(
            XrpcCall.query_call(
                "app.bsky.feed.getFeedSkeleton",
                query=[("feed", feed), ("limit", _check_limit(limit)), ("cursor", cursor)],
                output=FeedGetFeedSkeletonOutput,
                auth="optional",
                pds_url=pds_url,
            )
        )


class GraphApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def get_lists(self, actor: str, *, limit: int | None = None, cursor: str | None = None) -> Any:
        return self._request(
            XrpcCall.query_call(
                "app.bsky.graph.getLists",
                query=[("actor", actor), ("limit", _check_limit(limit)), ("cursor", cursor)],
                output=GraphGetListsOutput,
                auth="required",
            )
        )


class UnspeccedApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def get_popular_feed_generators(
        self,
        *,
        limit: int | None = None,
        cursor: str | None = None,
        query: str | None = None,
    ) -> Any:
        return self._request(
            XrpcCall.query_call(
                "app.bsky.unspecced.getPopularFeedGenerators",
                query=[("limit", _check_limit(limit)), ("cursor", cursor), ("query", query)],
                output=UnspeccedGetPopularFeedGeneratorsOutput,
                auth="required",
            )
        )


class OzoneSetApi:
    def __init__(self, request: RequestFn) -> None:
        self._request = request

    def upsert_set(self, set_definition: SetDefinition) -> Any:
        return self._request(
            XrpcCall.procedure_call(
                "tools.ozone.set.upsertSet",
                body=set_definition,
                output=SetViewDefinition,
                auth="required",
            )
        )
