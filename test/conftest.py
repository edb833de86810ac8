"""Shared fixtures: a fake requests session standing in for the Page4U API."""
from types import SimpleNamespace

import pytest

from page4u_mcp.config import Credential
from page4u_mcp.mcp import tools as _tools  # noqa: F401  (registers every tool)
from page4u_mcp.services.page4u import Page4UClient, install_client

NOT_JSON = object()


def ok(data=None, total=None):
    body = {"success": True, "data": data}
    if total is not None:
        body["total"] = total
    return body


def fail(code, message):
    return {"success": False, "error": {"code": code, "message": message}}


class FakeResponse:
    def __init__(self, body, status_code=200, text=""):
        self._body = body
        self.status_code = status_code
        self.text = text

    def json(self):
        if self._body is NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeSession:
    """Records every request and replays queued responses (or exceptions)."""

    def __init__(self):
        self.calls = []
        self._responses = []

    def queue(self, body, status_code=200, text=""):
        self._responses.append(FakeResponse(body, status_code, text))
        return self

    def raise_on_next(self, exc):
        self._responses.append(exc)
        return self

    def request(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        if not self._responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self):
        return self.calls[-1]

    def close(self):
        pass


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def credential():
    return Credential(token="test-token", base_url="https://api.page4u.test/")


@pytest.fixture
def client(credential, session):
    return Page4UClient(credential, timeout=5, session=session)


@pytest.fixture
def api(client, session):
    """Install a fake-backed client for the tools; yields the fake session."""
    install_client(client)
    yield session
    install_client(None)
