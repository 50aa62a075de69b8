import os

os.environ.setdefault("PORTAL_LOG_TO_FILE", "false")

import json as jsonlib

import pytest

from placement_portal.api import ApiClient, PortalAPI
from placement_portal.config import load_screen_config
from placement_portal.events import SessionChannel
from placement_portal.storage import MemoryStorage

BASE_URL = "http://portal.test/api"


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason=""):
        self.status_code = status_code
        self._body = body
        self.reason = reason
        self.headers = {"Content-Type": "application/json"}
        self.content = b"" if body is None else jsonlib.dumps(body).encode()
        self.text = self.content.decode()

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class FakeHTTP:
    """Stands in for ``requests.Session``; routes are keyed by (METHOD, path)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, method, path, body=None, status=200):
        self.routes[(method, path)] = FakeResponse(status, body)

    def handle(self, method, path, fn):
        """Register a callable ``fn(call) -> FakeResponse`` (or an exception to raise)."""
        self.routes[(method, path)] = fn

    def request(self, method, url, **kwargs):
        path = url[len(BASE_URL):]
        call = {"method": method, "path": path, **kwargs}
        self.calls.append(call)
        target = self.routes.get((method, path))
        if target is None:
            return FakeResponse(404, {"message": f"No route {method} {path}"})
        if isinstance(target, Exception):
            raise target
        if callable(target):
            return target(call)
        return target

    def paths(self, method=None):
        return [c["path"] for c in self.calls if method is None or c["method"] == method]


@pytest.fixture(autouse=True)
def _fresh_screen_config():
    load_screen_config.cache_clear()
    yield
    load_screen_config.cache_clear()


@pytest.fixture
def channel():
    return SessionChannel()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def http():
    return FakeHTTP()


@pytest.fixture
def client(storage, channel, http):
    return ApiClient(storage, base_url=BASE_URL, channel=channel, session=http)


@pytest.fixture
def api(client):
    return PortalAPI(client)


@pytest.fixture
def student_payload():
    return {
        "_id": "u1",
        "email": "asha@example.edu",
        "role": "student",
        "firstName": "Asha",
        "lastName": "Rao",
    }
