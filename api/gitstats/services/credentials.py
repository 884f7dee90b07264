"""Per-request bearer resolution.

The OAuth dance happens elsewhere; by the time a request reaches the API the
session layer has put the user's GitHub token in the ``Authorization`` header.
"""

from __future__ import annotations

from typing import Optional

from gitstats.services.errors import NoAuthorizedClient


def has_principal(authorization: Optional[str]) -> bool:
    return bool(authorization and authorization.strip())


def resolve_bearer(authorization: Optional[str]) -> str:
    """Extract the token from ``Bearer <token>``; raise NoAuthorizedClient when it is unusable."""
    if not has_principal(authorization):
        raise NoAuthorizedClient("no authorization header on request")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise NoAuthorizedClient("authorization header does not carry a bearer token")
    return token.strip()
