"""Session state shared by every call a client makes.

``SessionContext`` holds an immutable ``Session`` snapshot. Calls read the
current snapshot without locking; login, refresh and logout replace the
snapshot whole under a lock, so a call always sees one consistent pair of
host and token.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Literal

from .errors import InvalidRequestURLError, MissingActiveSessionError

AuthMode = Literal["none", "optional", "required", "refresh"]


@dataclass(frozen=True, slots=True)
class Session:
    pds_url: str | None
    access_token: str | None = None
    refresh_token: str | None = None
    did: str | None = None
    handle: str | None = None

    def __post_init__(self) -> None:
        has_host = bool(self.pds_url and self.pds_url.strip())
        if (self.access_token or self.refresh_token) and not has_host:
            raise ValueError("a session carrying tokens requires a pds_url")


class SessionContext:
    def __init__(self, session: Session | None = None) -> None:
        self._session = session
        self._write_lock = threading.Lock()

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        session = self._session
        return session is not None and bool(session.access_token)

    def replace(self, session: Session | None) -> None:
        with self._write_lock:
            self._session = session

    def clear(self) -> None:
        self.replace(None)

    def resolve_host(self, override: str | None = None) -> str:
        """Pick the host for a call that does not need authentication."""

        return _host_for(self._session, override)

    def require_access(self) -> tuple[str, str]:
        session = self._session
        if session is None or not session.access_token:
            raise MissingActiveSessionError("this call requires an active session with an access token")
        if not session.pds_url:
            raise InvalidRequestURLError("active session has no pds_url")
        return session.pds_url, f"Bearer {session.access_token}"

    def require_refresh(self) -> tuple[str, str]:
        session = self._session
        if session is None or not session.refresh_token:
            raise MissingActiveSessionError("this call requires an active session with a refresh token")
        if not session.pds_url:
            raise InvalidRequestURLError("active session has no pds_url")
        return session.pds_url, f"Bearer {session.refresh_token}"

    def optional_access(self, override: str | None = None) -> tuple[str, str | None]:
        # Tokens are bound to the session host; never send one elsewhere.
        session = self._session
        host = _host_for(session, override)
        if session is not None and session.access_token and host == session.pds_url:
            return host, f"Bearer {session.access_token}"
        return host, None

    def resolve(self, auth: AuthMode, override: str | None = None) -> tuple[str, str | None]:
        if auth == "required":
            return self.require_access()
        if auth == "refresh":
            return self.require_refresh()
        if auth == "optional":
            return self.optional_access(override)
        return self.resolve_host(override), None


def _host_for(session: Session | None, override: str | None) -> str:
    if override is not None:
        return override
    if session is None or not session.pds_url:
        raise InvalidRequestURLError("no pds_url given and no active session host")
    return session.pds_url
