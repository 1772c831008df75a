"""Exception hierarchy shared by the identifier codec, transport and poller."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .transport import HttpResponse


class ArmKitError(Exception):
    """Base class for every error raised by armkit."""


# ---------------------------------------------------------------------------
# Resource identifiers
# ---------------------------------------------------------------------------


class MalformedIdentifier(ArmKitError, ValueError):
    """A resource ID string is missing a required element or has an empty segment."""


class UnexpectedSegment(MalformedIdentifier):
    """A resource ID parsed cleanly but left segments nobody asked for."""

    def __init__(self, segments: list[tuple[str, str]]):
        self.segments = segments
        rendered = ", ".join(f"{k}/{v}" for k, v in segments)
        super().__init__(f"ID contained more segments than required: {rendered}")


class InvalidParameter(ArmKitError, ValueError):
    """A client method argument failed validation before any request was sent."""


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportError(ArmKitError):
    """The request never produced an HTTP response (DNS, TCP, TLS, timeout)."""


class UnexpectedResponse(ArmKitError):
    """The service answered with a status code the caller did not expect."""

    def __init__(self, response: HttpResponse, expected: tuple[int, ...] = ()):
        self.response = response
        self.status_code = response.status_code
        self.body = response.body
        self.error = error_payload(response)
        message = f"unexpected status {response.status_code}"
        if expected:
            message += f" (expected {', '.join(str(c) for c in expected)})"
        if self.error:
            message += f": {self.error.get('code', '')} {self.error.get('message', '')}".rstrip()
        super().__init__(message)


# ---------------------------------------------------------------------------
# Long-running operations
# ---------------------------------------------------------------------------


class NotAsync(ArmKitError):
    """The initial response carries no long-running operation indicator."""

    def __init__(self, message: str, response: HttpResponse | None = None):
        self.response = response
        super().__init__(message)


class PollError(ArmKitError):
    """A status poll failed at the transport level. Safe to retry."""


class Incomplete(ArmKitError):
    """``result`` was requested before the operation reached a terminal state."""


class OperationFailed(ArmKitError):
    """The operation finished as Failed or Canceled."""

    def __init__(self, status: str, error: Any = None, response: HttpResponse | None = None):
        self.status = status
        self.error = error
        self.response = response
        message = f"long-running operation finished with status {status}"
        if isinstance(error, dict) and error:
            message += f": {error.get('code', '')} {error.get('message', '')}".rstrip()
        elif error:
            message += f": {error}"
        super().__init__(message)


class DecodeError(ArmKitError):
    """The terminal response body did not match the expected result schema."""

    def __init__(self, message: str, body: bytes = b""):
        self.body = body
        super().__init__(f"{message}; raw body: {body[:500]!r}")


class PollingCanceled(ArmKitError):
    """The caller's cancellation signal fired while waiting for an operation."""


class PollingTimeout(ArmKitError):
    """The operation did not reach a terminal state within the allotted time."""


def error_payload(response: HttpResponse) -> dict[str, Any]:
    """Extract the ARM ``error`` object from a response body, if there is one."""
    try:
        data = response.json()
    except ValueError:
        return {}
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            return err
    return {}
