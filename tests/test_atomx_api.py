"""Tests for login, logout and resource fetches against a fake Atomx server."""

import json

import httpx
import pytest

from adapters.atomx_api import AtomxApi
from adapters.credential_store import StaticCredentialStore
from core.config import AppSettings
from core.domain.models import EndpointDescriptor
from core.errors import ConfigurationError, PayloadShapeError, TransportError
from core.session import AuthSession

PUBLISHERS = {"resource": "publisher", "publisher": [{"name": "Acme"}]}


class TestLogin:
    @pytest.mark.anyio
    async def test_success_sets_token_and_calls_back_once(self, api, server, notices):
        server.login_ok("tok-123", message="Welcome back")
        received = []

        result = await api.login(received.append)

        assert result.ok
        assert result.value == "tok-123"
        assert api.session.token == "tok-123"
        assert received == ["tok-123"]
        assert notices == ["Welcome back"]

    @pytest.mark.anyio
    async def test_request_shape(self, api, server):
        server.login_ok()

        await api.login()

        (request,) = server.requests
        assert request.method == "POST"
        assert str(request.url) == "https://api.atomx.com/v3/login"
        assert json.loads(request.content) == {"email": "me@example.com", "password": "s3cret"}
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Content-Type"] == "application/json;charset=utf-8"
        assert request.headers["User-Agent"] == "atomx-client/0.1"

    @pytest.mark.anyio
    async def test_http_failure_keeps_previous_token(self, api, server):
        server.add("POST", "/v3/login", 500, {"error": "boom"})
        api.session.set_token("old-token")
        received, errors = [], []

        result = await api.login(received.append, on_error=errors.append)

        assert not result.ok
        assert isinstance(result.error, TransportError)
        assert result.error.status_code == 500
        assert api.session.token == "old-token"
        assert received == []
        assert errors == [result.error]

    @pytest.mark.anyio
    async def test_network_failure_is_reported_not_raised(self, settings, store):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = AtomxApi(settings, credential_store=store, transport=httpx.MockTransport(refuse))
        errors = []

        result = await api.login(on_error=errors.append)

        assert not result.ok
        assert isinstance(result.error, TransportError)
        assert result.error.status_code is None
        assert len(errors) == 1
        assert api.session.token is None

    @pytest.mark.anyio
    async def test_response_without_token(self, api, server):
        server.add("POST", "/v3/login", 200, {"message": "hello"})
        received = []

        result = await api.login(received.append)

        assert isinstance(result.error, PayloadShapeError)
        assert received == []
        assert api.session.token is None

    @pytest.mark.anyio
    async def test_missing_credentials_fail_before_network(self, settings, server):
        api = AtomxApi(
            settings,
            credential_store=StaticCredentialStore(),
            transport=server.transport,
        )

        with pytest.raises(ConfigurationError):
            await api.login()
        assert server.requests == []

    @pytest.mark.anyio
    async def test_configured_credentials_take_precedence(self, store, server):
        settings = AppSettings(_env_file=None, email="cfg@example.com", password="cfg-pw")
        api = AtomxApi(settings, credential_store=store, transport=server.transport)
        server.login_ok()

        await api.login()

        body = json.loads(server.requests[0].content)
        assert body == {"email": "cfg@example.com", "password": "cfg-pw"}

    @pytest.mark.anyio
    async def test_missing_field_falls_back_to_store(self, store, server):
        settings = AppSettings(_env_file=None, email="cfg@example.com")
        api = AtomxApi(settings, credential_store=store, transport=server.transport)
        server.login_ok()

        await api.login()

        body = json.loads(server.requests[0].content)
        assert body == {"email": "cfg@example.com", "password": "s3cret"}

    @pytest.mark.anyio
    async def test_domain_override(self, api, server):
        server.login_ok()

        await api.login(domain="sandbox-api.atomx.com")

        request = server.requests[0]
        assert request.url.host == "sandbox-api.atomx.com"
        assert json.loads(request.content)["email"] == "sandbox@example.com"

    @pytest.mark.anyio
    async def test_new_login_replaces_token(self, api, server):
        server.login_ok("first")
        await api.login()
        server.login_ok("second")
        await api.login()

        assert api.session.token == "second"


class TestLogout:
    def test_clears_token(self, api, notices):
        api.session.set_token("tok")

        api.logout()

        assert api.session.token is None
        assert notices == ["Logged out"]


class TestGet:
    @pytest.mark.anyio
    async def test_callback_receives_unwrapped_payload(self, api, server):
        server.add("GET", "/v3/publisher", json=PUBLISHERS)
        received = []

        result = await api.get("publisher", callback=received.append)

        assert received == [[{"name": "Acme"}]]
        assert result.value == [{"name": "Acme"}]

    @pytest.mark.anyio
    async def test_sends_bearer_token(self, api, server):
        server.add("GET", "/v3/publisher", json=PUBLISHERS)
        api.session.set_token("tok-123")

        await api.get("publisher", callback=lambda payload: None)

        request = server.requests[0]
        assert request.headers["Authorization"] == "Bearer tok-123"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.anyio
    async def test_without_callback_emits_default_notice(self, api, server, notices):
        server.add("GET", "/v3/publisher/5", json={"resource": "publisher", "publisher": {"id": 5}})

        await api.get("publisher", "5")

        assert notices == ["publisher: {'id': 5}"]

    @pytest.mark.anyio
    async def test_non_callable_positional_is_a_slug_segment(self, api, server):
        server.add("GET", "/v3/publisher/5", json=PUBLISHERS)

        positional = await api.get("publisher", "5")
        explicit = await api.get("publisher", *["5"], callback=None)

        assert positional == explicit
        assert [str(r.url) for r in server.requests] == [
            "https://api.atomx.com/v3/publisher/5",
            "https://api.atomx.com/v3/publisher/5",
        ]

    @pytest.mark.anyio
    async def test_callable_positional_is_the_callback(self, api, server):
        server.add("GET", "/v3/publisher/5/stats", json=PUBLISHERS)
        received = []

        await api.get("publisher", received.append, 5, "stats")

        assert received == [[{"name": "Acme"}]]
        assert server.requests[0].url.path == "/v3/publisher/5/stats"

    @pytest.mark.anyio
    async def test_envelope_naming_missing_field(self, api, server):
        server.add("GET", "/v3/publisher", json={"resource": "publisher"})
        received, errors = [], []

        result = await api.get("publisher", callback=received.append, on_error=errors.append)

        assert isinstance(result.error, PayloadShapeError)
        assert received == []
        assert errors == [result.error]

    @pytest.mark.anyio
    async def test_non_json_body(self, settings, store):
        def text(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        api = AtomxApi(settings, credential_store=store, transport=httpx.MockTransport(text))

        result = await api.get("publisher")

        assert isinstance(result.error, PayloadShapeError)

    @pytest.mark.anyio
    async def test_unauthorized(self, api, server):
        server.add("GET", "/v3/publisher", 401, {"error": "unauthorized"})

        result = await api.get("publisher")

        assert isinstance(result.error, TransportError)
        assert result.error.status_code == 401
        assert result.error.url == "https://api.atomx.com/v3/publisher"

    @pytest.mark.anyio
    async def test_does_not_touch_session(self, api, server):
        server.add("GET", "/v3/publisher", 401, {"error": "unauthorized"})
        api.session.set_token("tok")

        await api.get("publisher")

        assert api.session.token == "tok"


class TestWithEndpoint:
    @pytest.mark.anyio
    async def test_shares_session_and_leaves_original_settings(self, api, server):
        server.login_ok("scoped", path="/v2/login")
        endpoint = EndpointDescriptor(domain="sandbox-api.atomx.com", port=8000, version="v2")

        scoped = api.with_endpoint(endpoint)
        await scoped.login()

        assert str(server.requests[0].url) == "http://sandbox-api.atomx.com:8000/v2/login"
        assert api.session.token == "scoped"
        assert api.settings.api_domain == "api.atomx.com"
        assert api.settings.api_port == 443


def test_sessions_are_not_shared_between_clients(settings, store):
    first = AtomxApi(settings, session=AuthSession("a"), credential_store=store)
    second = AtomxApi(settings, credential_store=store)
    assert second.session.token is None
    assert first.session.token == "a"
