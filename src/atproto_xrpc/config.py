"""Configuration helpers for atproto-xrpc client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "atproto-xrpc"


@dataclass(slots=True)
class ClientConfig:
    pds_url: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.pds_url = normalize_pds_url(self.pds_url)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        pds_url = _trim_or_none(os.getenv("ATPROTO_PDS_URL"))
        timeout_ms = _parse_positive_int(os.getenv("ATPROTO_TIMEOUT_MS"))
        timeout_seconds = (timeout_ms / 1000.0) if timeout_ms else DEFAULT_TIMEOUT_SECONDS
        user_agent = _trim_or_none(os.getenv("ATPROTO_USER_AGENT")) or DEFAULT_USER_AGENT
        return cls(pds_url=pds_url, timeout_seconds=timeout_seconds, user_agent=user_agent)

    def http_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, **self.headers}


def normalize_pds_url(value: str | None) -> str | None:
    trimmed = _trim_or_none(value)
    if trimmed is None:
        return None
    return trimmed.rstrip("/")


def _trim_or_none(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if trimmed else None


def _parse_positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None
