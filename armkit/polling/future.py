"""Long-running operation tracking.

ARM answers slow writes with 201/202 and a URL to poll. ``AsyncOperation``
holds that URL and the last observed status, and advances one step each
time ``done`` is called::

    Accepted -> InProgress -> {Succeeded, Failed, Canceled}

It never sleeps or loops on its own; see ``wait_for_completion`` for a
caller-side cadence.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from ..errors import (
    DecodeError,
    Incomplete,
    NotAsync,
    OperationFailed,
    PollError,
    TransportError,
    UnexpectedResponse,
    error_payload,
)
from ..services.resilience import STATUS_CODES_FOR_RETRY
from ..transport import HttpRequest, HttpResponse, HttpSender

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

AZURE_ASYNC_OPERATION = "Azure-AsyncOperation"
LOCATION = "Location"
RETRY_AFTER = "Retry-After"


class OperationStatus(str, Enum):
    ACCEPTED = "Accepted"
    IN_PROGRESS = "InProgress"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELED = "Canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (OperationStatus.SUCCEEDED, OperationStatus.FAILED, OperationStatus.CANCELED)

    @classmethod
    def from_remote(cls, value: str) -> OperationStatus:
        """Map a service status string (any casing) onto an OperationStatus."""
        lowered = value.lower()
        if lowered == "succeeded":
            return cls.SUCCEEDED
        if lowered == "failed":
            return cls.FAILED
        if lowered in ("canceled", "cancelled"):
            return cls.CANCELED
        return cls.IN_PROGRESS


class PollingMethod(str, Enum):
    ASYNC_OPERATION = "azure-async-operation"
    LOCATION = "location"
    BODY = "body"


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def json_decoder(response: HttpResponse) -> Any:
    return response.json()


def model_decoder(model: type[M]) -> Callable[[HttpResponse], M]:
    """Decoder that validates the body against a pydantic model."""
    def decode(response: HttpResponse) -> M:
        return model.model_validate_json(response.body)
    return decode


# ---------------------------------------------------------------------------
# AsyncOperation
# ---------------------------------------------------------------------------


class AsyncOperation(Generic[T]):
    """State of one long-running operation. Owned by a single caller; not thread-safe."""

    def __init__(
        self,
        polling_url: str,
        polling_method: PollingMethod,
        resource_url: Optional[str] = None,
        status: OperationStatus = OperationStatus.ACCEPTED,
        last_response: Optional[HttpResponse] = None,
        decoder: Callable[[HttpResponse], T] = json_decoder,
    ):
        self.polling_url = polling_url
        self.polling_method = polling_method
        self.resource_url = resource_url
        self.status = status
        self.last_response = last_response
        self.decoder = decoder
        self.error: Any = None

    # -- Construction ------------------------------------------------------

    @classmethod
    def from_response(
        cls,
        initial: HttpResponse,
        decoder: Callable[[HttpResponse], T] = json_decoder,
    ) -> AsyncOperation[T]:
        """Start tracking the operation announced by *initial*.

        Raises NotAsync when the response has no polling header and no
        in-progress status body.
        """
        if not 200 <= initial.status_code < 400:
            raise NotAsync(
                f"initial response has status {initial.status_code}, not a 2xx/3xx acceptance",
                initial,
            )

        request = initial.request
        method = request.method.upper() if request is not None else ""
        async_url = initial.header(AZURE_ASYNC_OPERATION)
        location = initial.header(LOCATION)

        if async_url:
            polling_url, polling_method = async_url, PollingMethod.ASYNC_OPERATION
        elif location:
            polling_url, polling_method = location, PollingMethod.LOCATION
        elif initial.status_code in (200, 201) and request is not None and _in_progress_body(initial):
            polling_url, polling_method = request.url, PollingMethod.BODY
        else:
            raise NotAsync(
                f"response with status {initial.status_code} carries no "
                f"{AZURE_ASYNC_OPERATION} or {LOCATION} header and no in-progress status",
                initial,
            )

        resource_url: Optional[str] = None
        if method in ("PUT", "PATCH") and request is not None:
            resource_url = request.url
        elif method in ("POST", "DELETE") and polling_method is PollingMethod.ASYNC_OPERATION:
            resource_url = location

        logger.debug(
            "Tracking %s operation via %s: %s", method or "unknown", polling_method.value, polling_url,
        )
        return cls(
            polling_url=polling_url,
            polling_method=polling_method,
            resource_url=resource_url,
            last_response=initial,
            decoder=decoder,
        )

    @classmethod
    def completed(
        cls,
        response: HttpResponse,
        decoder: Callable[[HttpResponse], T] = json_decoder,
    ) -> AsyncOperation[T]:
        """Wrap a response that finished synchronously so callers can treat it uniformly."""
        url = response.request.url if response.request is not None else ""
        op: AsyncOperation[T] = cls(
            polling_url=url,
            polling_method=PollingMethod.BODY,
            decoder=decoder,
        )
        op._observe(response)
        if not op.status.is_terminal:
            op.status = OperationStatus.SUCCEEDED
        return op

    @classmethod
    def from_json(
        cls,
        data: str | dict[str, Any],
        decoder: Callable[[HttpResponse], T] = json_decoder,
    ) -> AsyncOperation[T]:
        """Resume an operation saved with ``to_json``."""
        if isinstance(data, str):
            data = json.loads(data)
        return cls(
            polling_url=data["polling_url"],
            polling_method=PollingMethod(data.get("polling_method", PollingMethod.ASYNC_OPERATION.value)),
            resource_url=data.get("resource_url"),
            status=OperationStatus(data.get("status", OperationStatus.ACCEPTED.value)),
            decoder=decoder,
        )

    def to_json(self) -> str:
        return json.dumps({
            "polling_url": self.polling_url,
            "polling_method": self.polling_method.value,
            "resource_url": self.resource_url,
            "status": self.status.value,
        })

    # -- State advancement -------------------------------------------------

    def done(self, sender: HttpSender) -> bool:
        """Poll once. Returns True once the operation is terminal.

        Raises PollError on transport failure, leaving the state untouched.
        """
        if self.status.is_terminal:
            return True

        try:
            response = sender.send(HttpRequest("GET", self.polling_url))
        except (TransportError, OSError) as e:
            raise PollError(f"polling {self.polling_url} failed: {e}") from e

        previous = self.status
        self._observe(response)
        if self.status is not previous:
            logger.debug("Operation %s: %s -> %s", self.polling_url, previous.value, self.status.value)
        return self.status.is_terminal

    def result(self, sender: HttpSender) -> Optional[T]:
        """Return the decoded result of a succeeded operation.

        Returns None when the final response has no body (e.g. HTTP 204).
        """
        if not self.status.is_terminal:
            raise Incomplete(f"operation at {self.polling_url} has not completed (status {self.status.value})")
        if self.status is not OperationStatus.SUCCEEDED:
            raise OperationFailed(self.status.value, self.error, self.last_response)

        response = self.last_response
        if self._needs_final_get():
            response = self._final_get(sender)

        if response is None or response.status_code == 204 or not response.body.strip():
            return None

        try:
            return self.decoder(response)
        except (ValueError, TypeError, KeyError) as e:
            raise DecodeError(f"could not decode operation result: {e}", response.body) from e

    @property
    def retry_after(self) -> Optional[float]:
        """Seconds the service asked us to wait before the next poll, if it said."""
        if self.last_response is None:
            return None
        value = self.last_response.header(RETRY_AFTER)
        if not value:
            return None
        try:
            return max(0.0, float(value))
        except ValueError:
            pass
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when is None:
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())

    # -- Internals ---------------------------------------------------------

    def _observe(self, response: HttpResponse) -> None:
        self.last_response = response

        if response.status_code in STATUS_CODES_FOR_RETRY:
            logger.warning(
                "Transient status %d polling %s; operation stays %s",
                response.status_code, self.polling_url, self.status.value,
            )
            return

        if response.status_code >= 400:
            self.status = OperationStatus.FAILED
            self.error = error_payload(response) or response.body.decode("utf-8", errors="replace")
            return

        remote = _body_status(response)
        if remote is not None:
            status = OperationStatus.from_remote(remote)
        elif response.status_code == 202:
            status = OperationStatus.IN_PROGRESS
        else:
            status = OperationStatus.SUCCEEDED

        if status in (OperationStatus.FAILED, OperationStatus.CANCELED):
            self.error = error_payload(response) or None
        elif status is OperationStatus.IN_PROGRESS:
            self._follow_headers(response)
        self.status = status

    def _follow_headers(self, response: HttpResponse) -> None:
        if self.polling_method is PollingMethod.ASYNC_OPERATION:
            url = response.header(AZURE_ASYNC_OPERATION)
        elif self.polling_method is PollingMethod.LOCATION:
            url = response.header(LOCATION)
        else:
            url = None
        if url:
            self.polling_url = url

    def _needs_final_get(self) -> bool:
        if not self.resource_url:
            return False
        if self.polling_method is PollingMethod.ASYNC_OPERATION:
            return True
        response = self.last_response
        return response is None or response.status_code == 204 or not response.body.strip()

    def _final_get(self, sender: HttpSender) -> HttpResponse:
        assert self.resource_url is not None
        try:
            response = sender.send(HttpRequest("GET", self.resource_url))
        except (TransportError, OSError) as e:
            raise PollError(f"fetching result from {self.resource_url} failed: {e}") from e
        if not response.ok:
            raise UnexpectedResponse(response, (200, 201, 204))
        return response

    def __repr__(self) -> str:
        return (
            f"AsyncOperation(status={self.status.value!r}, "
            f"polling_method={self.polling_method.value!r}, polling_url={self.polling_url!r})"
        )


def _body_status(response: HttpResponse) -> Optional[str]:
    """The ``status`` field, or ``properties.provisioningState``, of a JSON body."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    status = data.get("status")
    if isinstance(status, str) and status:
        return status
    props = data.get("properties")
    if isinstance(props, dict):
        state = props.get("provisioningState")
        if isinstance(state, str) and state:
            return state
    return None


def _in_progress_body(response: HttpResponse) -> bool:
    remote = _body_status(response)
    return remote is not None and not OperationStatus.from_remote(remote).is_terminal
