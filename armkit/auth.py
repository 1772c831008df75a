"""Authorization contract.

Credential acquisition (service principal, managed identity, CLI token, ...)
happens outside armkit; whatever produces the token only has to satisfy
:class:`Authorizer`.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .config import settings
from .transport import HttpRequest

logger = logging.getLogger(__name__)


class Authorizer(Protocol):
    def authorize(self, request: HttpRequest) -> HttpRequest: ...


class BearerTokenAuthorizer:
    """Adds a static ``Authorization: Bearer <token>`` header."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("a bearer token is required")
        self._token = token

    def authorize(self, request: HttpRequest) -> HttpRequest:
        return request.with_header("Authorization", f"Bearer {self._token}")

    def __repr__(self) -> str:
        return "BearerTokenAuthorizer(token=***)"


def authorizer_from_settings(token: Optional[str] = None) -> BearerTokenAuthorizer:
    """Build an authorizer from an explicit token or ``ARMKIT_ACCESS_TOKEN``."""
    token = token or settings.access_token
    if not token:
        raise RuntimeError("No access token configured — set ARMKIT_ACCESS_TOKEN")
    logger.debug("Using bearer token authorizer")
    return BearerTokenAuthorizer(token)
