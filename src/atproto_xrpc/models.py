"""Lexicon data models used by the bundled endpoints.

Field names are snake_case in Python and camelCase on the wire. String fields
with a declared maximum are truncated when serialized; decoding accepts
whatever the server sends.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .codec import WireDatetime, truncated


class LexiconModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# com.atproto.sync


class GetLatestCommitOutput(LexiconModel):
    cid: str
    rev: str


# com.atproto.server


class CreateSessionOutput(LexiconModel):
    access_jwt: str
    refresh_jwt: str
    handle: str
    did: str
    did_doc: dict[str, Any] | None = None
    email: str | None = None
    email_confirmed: bool | None = None
    email_auth_factor: bool | None = None
    active: bool | None = None
    status: str | None = None


class RefreshSessionOutput(LexiconModel):
    access_jwt: str
    refresh_jwt: str
    handle: str
    did: str
    did_doc: dict[str, Any] | None = None
    active: bool | None = None
    status: str | None = None


class GetServiceAuthOutput(LexiconModel):
    token: str


# app.bsky.actor / app.bsky.graph / app.bsky.feed


class ProfileViewBasic(LexiconModel):
    did: str
    handle: str
    display_name: Annotated[str | None, truncated(64)] = None
    avatar: str | None = None
    viewer: dict[str, Any] | None = None
    labels: list[dict[str, Any]] | None = None
    created_at: WireDatetime | None = None


class ListView(LexiconModel):
    uri: str
    cid: str
    creator: ProfileViewBasic
    name: Annotated[str, truncated(64)]
    purpose: str
    description: Annotated[str | None, truncated(300)] = None
    description_facets: list[dict[str, Any]] | None = None
    avatar: str | None = None
    list_item_count: int | None = None
    labels: list[dict[str, Any]] | None = None
    viewer: dict[str, Any] | None = None
    indexed_at: WireDatetime


class GraphGetListsOutput(LexiconModel):
    cursor: str | None = None
    lists: list[ListView]


class SkeletonFeedPost(LexiconModel):
    post: str
    reason: dict[str, Any] | None = None
    feed_context: Annotated[str | None, truncated(2000)] = None


class FeedGetFeedSkeletonOutput(LexiconModel):
    cursor: str | None = None
    feed: list[SkeletonFeedPost]
    req_id: Annotated[str | None, truncated(100)] = None


class GeneratorView(LexiconModel):
    uri: str
    cid: str
    did: str
    creator: ProfileViewBasic
    display_name: str
    description: Annotated[str | None, truncated(300)] = None
    description_facets: list[dict[str, Any]] | None = None
    avatar: str | None = None
    like_count: int | None = None
    accepts_interactions: bool | None = None
    labels: list[dict[str, Any]] | None = None
    viewer: dict[str, Any] | None = None
    content_mode: str | None = None
    indexed_at: WireDatetime


class UnspeccedGetPopularFeedGeneratorsOutput(LexiconModel):
    cursor: str | None = None
    feeds: list[GeneratorView]


# tools.ozone.set


class SetDefinition(LexiconModel):
    name: Annotated[str, truncated(128)]
    description: Annotated[str | None, truncated(1024)] = None


class SetViewDefinition(LexiconModel):
    name: Annotated[str, truncated(128)]
    description: Annotated[str | None, truncated(1024)] = None
    set_size: int
    created_at: WireDatetime
    updated_at: WireDatetime
