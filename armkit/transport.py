"""HTTP transport — request/response types, the sender contract and sender decorators.

Everything that talks to ARM does so through an object with a
``send(HttpRequest) -> HttpResponse`` method. Senders raise
:class:`~armkit.errors.TransportError` when no response was received and
return every HTTP status, including errors, as a response.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Iterable, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .config import settings
from .errors import TransportError
from .services.resilience import STATUS_CODES_FOR_RETRY, retry

if TYPE_CHECKING:
    from .auth import Authorizer

logger = logging.getLogger(__name__)


@dataclass
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def with_header(self, name: str, value: str) -> HttpRequest:
        """Return a copy with *name* set to *value*."""
        return replace(self, headers={**self.headers, name: value})


@dataclass
class HttpResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    request: HttpRequest | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for k, v in self.headers.items():
            if k.lower() == wanted:
                return v
        return None

    def json(self) -> Any:
        """Decode the body as JSON. Raises ValueError on an empty or invalid body."""
        if not self.body.strip():
            raise ValueError("response body is empty")
        return json.loads(self.body)


class HttpSender(Protocol):
    def send(self, request: HttpRequest) -> HttpResponse: ...


# ---------------------------------------------------------------------------
# urllib transport
# ---------------------------------------------------------------------------


class UrllibSender:
    """Sends requests with ``urllib.request``."""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout if timeout is not None else settings.request_timeout

    def send(self, request: HttpRequest) -> HttpResponse:
        req = Request(request.url, data=request.body, headers=request.headers, method=request.method)
        logger.debug("%s %s", request.method, request.url)

        try:
            with urlopen(req, timeout=self.timeout) as resp:
                return HttpResponse(
                    status_code=resp.status,
                    headers=dict(resp.headers.items()),
                    body=resp.read(),
                    request=request,
                )
        except HTTPError as e:
            body = e.read() if e.fp else b""
            headers = dict(e.headers.items()) if e.headers else {}
            return HttpResponse(status_code=e.code, headers=headers, body=body, request=request)
        except (URLError, OSError) as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e


# ---------------------------------------------------------------------------
# Sender decorators
# ---------------------------------------------------------------------------


class _RetryableStatus(Exception):
    def __init__(self, response: HttpResponse):
        self.response = response
        super().__init__(f"HTTP {response.status_code}")


class RetryingSender:
    """Retries transport errors and transient status codes with exponential backoff.

    When the last attempt still returns a retryable status, that response is
    returned to the caller rather than raised.
    """

    def __init__(
        self,
        sender: HttpSender,
        attempts: int | None = None,
        delay: float | None = None,
        status_codes: Iterable[int] = STATUS_CODES_FOR_RETRY,
    ):
        self.sender = sender
        self.attempts = attempts if attempts is not None else settings.retry_attempts
        self.delay = delay if delay is not None else settings.retry_delay
        self.status_codes = frozenset(status_codes)

    def send(self, request: HttpRequest) -> HttpResponse:
        @retry(
            max_attempts=self.attempts,
            base_delay=self.delay,
            retryable_exceptions=(TransportError, _RetryableStatus),
        )
        def send_once() -> HttpResponse:
            response = self.sender.send(request)
            if response.status_code in self.status_codes:
                raise _RetryableStatus(response)
            return response

        try:
            return send_once()
        except _RetryableStatus as e:
            return e.response


class AuthorizingSender:
    """Lets an authorizer decorate every request before it is sent."""

    def __init__(self, sender: HttpSender, authorizer: Authorizer):
        self.sender = sender
        self.authorizer = authorizer

    def send(self, request: HttpRequest) -> HttpResponse:
        return self.sender.send(self.authorizer.authorize(request))


def build_sender(authorizer: Authorizer | None = None, retries: bool = True) -> HttpSender:
    """The default stack: urllib, optionally authorized, optionally retried."""
    sender: HttpSender = UrllibSender()
    if authorizer is not None:
        sender = AuthorizingSender(sender, authorizer)
    if retries:
        sender = RetryingSender(sender)
    return sender
