from __future__ import annotations

import json
from typing import Any

import pytest

from homeboard.widgets.proxy import TransportResponse


def json_response(data: Any, status: int = 200) -> TransportResponse:
    return TransportResponse(status=status, body=json.dumps(data).encode("utf-8"))


class FakeTransport:
    """Answers by URL prefix and records every call."""

    def __init__(self, routes: dict[str, TransportResponse | Exception]) -> None:
        self.routes = routes
        self.calls: list[dict[str, Any]] = []

    def __call__(self, url, headers, method="GET", body=None):
        self.calls.append({"url": url, "headers": headers, "method": method, "body": body})
        for prefix, answer in self.routes.items():
            if url.startswith(prefix):
                if isinstance(answer, Exception):
                    raise answer
                return answer
        return TransportResponse(status=404, body=b"")

    @property
    def urls(self) -> list[str]:
        return [c["url"] for c in self.calls]


@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture
def respond():
    return json_response
