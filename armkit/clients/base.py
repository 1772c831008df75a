"""Base class for ARM management clients."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, Optional, TypeVar
from urllib.parse import quote, urlencode

from pydantic import BaseModel

from ..config import settings
from ..errors import DecodeError, InvalidParameter, NotAsync, UnexpectedResponse
from ..polling import AsyncOperation
from ..transport import HttpRequest, HttpResponse, HttpSender, build_sender

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

_RESOURCE_GROUP_PATTERN = re.compile(r"^[-\w._]+$")


def validate_resource_group_name(name: str) -> None:
    """Resource group names are 1-90 characters of word chars, '-', '.', '_'."""
    if not 1 <= len(name) <= 90:
        raise InvalidParameter(f"resourceGroupName must be 1-90 characters, got {len(name)}")
    if not _RESOURCE_GROUP_PATTERN.match(name):
        raise InvalidParameter(f"resourceGroupName {name!r} must match {_RESOURCE_GROUP_PATTERN.pattern}")


def decode_model(model: type[M], response: HttpResponse) -> M:
    """Validate a response body against *model*, raising DecodeError on mismatch."""
    try:
        return model.model_validate_json(response.body)
    except ValueError as e:
        raise DecodeError(f"could not decode {model.__name__}: {e}", response.body) from e


def coerce_model(model: type[M], value: M | dict[str, Any], name: str) -> M:
    """Accept either a model instance or a plain dict for a request parameter."""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValueError as e:
        raise InvalidParameter(f"{name} is invalid: {e}") from e


class ArmClient(ABC):
    """Common plumbing for one ARM resource type.

    Subclasses declare ``api_version`` and build requests with ``_url`` and
    ``_request``; long-running writes go through ``_begin``.
    """

    def __init__(
        self,
        subscription_id: Optional[str] = None,
        sender: Optional[HttpSender] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.subscription_id = subscription_id or settings.subscription_id
        if not self.subscription_id:
            raise InvalidParameter("a subscription ID is required — pass one or set ARMKIT_SUBSCRIPTION_ID")
        if sender is None:
            from ..auth import authorizer_from_settings
            sender = build_sender(authorizer_from_settings())
        self.sender = sender
        self.base_url = (base_url or settings.management_endpoint).rstrip("/")

    @property
    @abstractmethod
    def api_version(self) -> str:
        """API version sent as the ``api-version`` query parameter."""
        ...

    # -- Request helpers ---------------------------------------------------

    def _url(self, template: str, query: Optional[dict[str, Any]] = None, **path_params: str) -> str:
        params = {"subscriptionId": self.subscription_id, **path_params}
        path = template.format(**{k: quote(str(v), safe="") for k, v in params.items()})
        query_params = {"api-version": self.api_version}
        for k, v in (query or {}).items():
            if v is not None and v != "":
                query_params[k] = str(v)
        return f"{self.base_url}{path}?{urlencode(query_params)}"

    def _request(self, method: str, url: str, body: Optional[dict[str, Any]] = None) -> HttpResponse:
        headers = {"Accept": "application/json"}
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json; charset=utf-8"
            data = json.dumps(body).encode()
        logger.debug("%s %s", method, url)
        return self.sender.send(HttpRequest(method, url, headers, data))

    @staticmethod
    def _check_status(response: HttpResponse, *expected: int) -> HttpResponse:
        if response.status_code not in expected:
            raise UnexpectedResponse(response, expected)
        return response

    def _begin(
        self,
        response: HttpResponse,
        decoder: Callable[[HttpResponse], T],
        *expected: int,
    ) -> AsyncOperation[T]:
        """Turn the initial response of a long-running call into an AsyncOperation.

        A 200/201/204 without polling headers finished synchronously and is
        returned as an already-succeeded operation.
        """
        self._check_status(response, *expected)
        try:
            return AsyncOperation.from_response(response, decoder)
        except NotAsync:
            if response.status_code == 202:
                raise
            logger.debug("Request completed synchronously with status %d", response.status_code)
            return AsyncOperation.completed(response, decoder)

    def _pages(self, url: str, page_model: type[M]) -> Iterator[M]:
        """Yield every page of a list call, following ``nextLink``."""
        next_url: Optional[str] = url
        while next_url:
            response = self._check_status(self._request("GET", next_url), 200)
            page = decode_model(page_model, response)
            yield page
            next_url = getattr(page, "next_link", None)
