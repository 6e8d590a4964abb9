"""
Shared fixtures: a scripted stand-in for ``requests.Session`` and a client wired to it.
"""

from dataclasses import dataclass
from http.client import responses as HTTP_REASONS
import json
import threading
from typing import Any
from unittest.mock import Mock
from urllib.parse import urlparse

import pytest
import requests

from shortlink_client.config import AppSettings
from shortlink_client.http import AuthenticatedHttpClient
from shortlink_client.token_store import InMemoryTokenStore


def make_response(status: int, body: Any = None, headers: dict | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = HTTP_REASONS.get(status, "")
    response.encoding = "utf-8"
    if body is None:
        response._content = b""
    else:
        if isinstance(body, bytes):
            content = body
        elif isinstance(body, str):
            content = body.encode("utf-8")
        else:
            content = json.dumps(body).encode("utf-8")
        response._content = content
        response.headers["Content-Length"] = str(len(content))
    if headers:
        response.headers.update(headers)
    return response


@dataclass
class RecordedCall:
    method: str
    path: str
    headers: dict
    data: Any
    timeout: Any

    @property
    def json(self) -> Any:
        return json.loads(self.data)


class FakeSession:
    """Serves queued responses per (method, path) and records every request."""

    def __init__(self):
        self.headers: dict[str, str] = {}
        self.calls: list[RecordedCall] = []
        self._routes: dict[tuple[str, str], list] = {}
        self._lock = threading.Lock()

    def add(self, method: str, path: str, *items) -> None:
        with self._lock:
            self._routes.setdefault((method, path), []).extend(items)

    def request(self, method, url, headers=None, data=None, timeout=None):
        path = urlparse(url).path
        call = RecordedCall(method, path, dict(headers or {}), data, timeout)
        with self._lock:
            self.calls.append(call)
            queue = self._routes.get((method, path))
            if not queue:
                raise AssertionError(f"Unexpected request: {method} {path}")
            item = queue.pop(0)

        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(call)
        return item

    def calls_to(self, method: str, path: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.method == method and call.path == path]


@pytest.fixture
def settings(tmp_path):
    return AppSettings(
        base_url="http://shortener.test",
        timeout_seconds=5,
        token_store_path=str(tmp_path / "tokens.json"),
        log_level="DEBUG",
    )


@pytest.fixture
def token_store():
    return InMemoryTokenStore({"accessToken": "A1", "refreshToken": "R1"})


@pytest.fixture
def terminator():
    return Mock(name="session_terminator")


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(settings, token_store, terminator, fake_session):
    return AuthenticatedHttpClient(settings, token_store, terminator, session=fake_session)
