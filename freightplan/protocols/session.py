"""
Session Protocol: who is calling and for which organization.

Authentication lives outside Freightplan. A SessionBackend turns an incoming
request into a Session; None means the request is unauthenticated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class Session:
    """Authenticated caller bound to one organization."""

    user_id: int
    organization_id: int
    role: str
    user: Any = None


@runtime_checkable
class SessionBackend(Protocol):
    """Resolves the caller of a request."""

    def get_session(self, request) -> Session | None:
        """
        Return the session for request, or None if unauthenticated.

        Implementations must not raise for anonymous requests.
        """
        ...
