"""Shared pytest fixtures."""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Callable

import pytest

from armkit.transport import HttpRequest, HttpResponse

SUB = "11111111-1111-1111-1111-111111111111"
BASE = "https://management.azure.com"


class FakeSender:
    """Replays scripted responses (or raises scripted exceptions) and records requests."""

    def __init__(self, *responses: HttpResponse | Exception):
        self._responses = list(responses)
        self.requests: list[HttpRequest] = []

    def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if item.request is None:
            item = replace(item, request=request)
        return item


def _response(
    status: int = 200,
    body: Any = None,
    headers: dict[str, str] | None = None,
    request: HttpRequest | None = None,
) -> HttpResponse:
    if body is None:
        data = b""
    elif isinstance(body, bytes):
        data = body
    else:
        data = json.dumps(body).encode()
    return HttpResponse(status_code=status, headers=headers or {}, body=data, request=request)


@pytest.fixture
def response() -> Callable[..., HttpResponse]:
    """Factory: response(status, body=None, headers=None, request=None)."""
    return _response


@pytest.fixture
def sender() -> Callable[..., FakeSender]:
    """Factory: sender(*responses) -> FakeSender."""
    return FakeSender


@pytest.fixture
def put_request() -> HttpRequest:
    return HttpRequest(
        "PUT",
        f"{BASE}/subscriptions/{SUB}/resourceGroups/my-rg/providers/Microsoft.AAD"
        "/domainServices/my-domain?api-version=2020-01-01",
    )
