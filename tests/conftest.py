"""Shared fixtures: isolated settings, a fake Atomx server and a wired client."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from adapters.atomx_api import AtomxApi
from adapters.credential_store import StaticCredentialStore
from core.config import AppSettings
from core.session import AuthSession

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep real ATOMX_* variables and .env files out of the tests."""
    for var in (
        "ATOMX_API_DOMAIN",
        "ATOMX_API_VERSION",
        "ATOMX_API_PORT",
        "ATOMX_EMAIL",
        "ATOMX_PASSWORD",
        "ATOMX_USER_AGENT",
        "ATOMX_HTTP_TIMEOUT_SECONDS",
        "ATOMX_NETRC_PATH",
        "ATOMX_AUTH_TOKEN",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


class FakeAtomxServer:
    """Records every request and answers from a (method, path) routing table."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def add(self, method: str, path: str, status_code: int = 200, json: Any = None) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=json)

        self._routes[(method, path)] = respond

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self._routes[(method, path)] = handler

    def login_ok(self, token: str = "tok-123", *, path: str = "/v3/login", message: str = "Welcome") -> None:
        self.add(
            "POST",
            path,
            json={"user": {"id": 1, "email": "me@example.com"}, "message": message, "auth_token": token},
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def server() -> FakeAtomxServer:
    return FakeAtomxServer()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def store() -> StaticCredentialStore:
    return StaticCredentialStore(
        {
            "api.atomx.com": ("me@example.com", "s3cret"),
            "sandbox-api.atomx.com": ("sandbox@example.com", "sandbox-pw"),
        }
    )


@pytest.fixture
def notices() -> list[str]:
    return []


@pytest.fixture
def api(settings, store, server, notices) -> AtomxApi:
    return AtomxApi(
        settings,
        session=AuthSession(),
        credential_store=store,
        notify=notices.append,
        transport=server.transport,
    )
