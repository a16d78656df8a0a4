"""
Tests for request.py
Logic testing: State transitions, Decision/Branch, Path coverage
"""
import base64

import pytest

from kinvey_request.client import ClientContext
from kinvey_request.config import ApiRequestConfig, RequestConfig
from kinvey_request.errors import (
    CredentialsMissingError,
    NoActiveSessionError,
    PropertiesTooLargeError,
    ReentrancyError,
    ValidationError,
)
from kinvey_request.request import ApiRequest, Request
from kinvey_request.types import AuthorizationHeader, AuthType, PreparedRequest


def b64(s):
    return base64.b64encode(s.encode()).decode()


class RecordingTransport:
    """Transport double that records what it is sent."""

    def __init__(self):
        self.sent = []

    async def send(self, request):
        self.sent.append(request)
        return {"status": 200}


class TestRequestConfigCoercion:
    """Tests for Request.config."""

    def test_default_config(self):
        request = Request()

        assert isinstance(request.config, RequestConfig)
        assert request.method == "GET"

    def test_mapping_coerced(self):
        request = Request({"method": "post", "url": "https://x/y"})

        assert request.method == "POST"
        assert request.url == "https://x/y"

    def test_api_config_accepted(self):
        config = ApiRequestConfig(url="https://x/y")

        assert Request(config).config is config

    def test_api_request_coerces_plain_config(self):
        request = ApiRequest(RequestConfig(method="delete", url="https://x/y"))

        assert isinstance(request.config, ApiRequestConfig)
        assert request.method == "DELETE"

    def test_invalid_config(self):
        with pytest.raises(ValidationError):
            Request(42)

    def test_proxies(self):
        request = Request()
        request.method = "put"
        request.url = "https://x/y"
        request.data = {"a": 1}
        request.headers = {"X-A": "1"}

        assert request.config.method == "PUT"
        assert request.config.url == "https://x/y"
        assert request.body == {"a": 1}
        assert request.headers.get("x-a") == "1"


class TestRequestExecute:
    """Tests for Request.execute state machine."""

    @pytest.mark.asyncio
    async def test_idle_to_executing(self):
        request = Request({"url": "https://x/y"})
        assert request.is_executing() is False

        await request.execute()

        assert request.is_executing() is True

    @pytest.mark.asyncio
    async def test_second_execute_fails(self):
        request = Request({"url": "https://x/y"})
        await request.execute()

        with pytest.raises(ReentrancyError):
            await request.execute()

    @pytest.mark.asyncio
    async def test_returns_prepared_without_transport(self):
        request = Request({"method": "post", "url": "https://x/y", "body": {"a": 1}, "timeout": 5})
        prepared = await request.execute()

        assert isinstance(prepared, PreparedRequest)
        assert prepared.method == "POST"
        assert prepared.url == "https://x/y"
        assert prepared.body == {"a": 1}
        assert prepared.timeout == 5
        assert prepared.headers["accept"].startswith("application/json")

    @pytest.mark.asyncio
    async def test_hands_off_to_transport(self):
        transport = RecordingTransport()
        request = Request({"url": "https://x/y"}, transport=transport)

        result = await request.execute()

        assert result == {"status": 200}
        assert transport.sent[0].url == "https://x/y"

    def test_cancel_is_noop(self):
        request = Request()
        request.cancel()

        assert request.is_executing() is False

    def test_to_json(self):
        request = Request({"method": "post", "url": "https://x/y", "body": "b"})
        snapshot = request.to_json()

        assert snapshot["method"] == "POST"
        assert snapshot["url"] == "https://x/y"
        assert snapshot["body"] == snapshot["data"] == "b"
        assert isinstance(snapshot["headers"], dict)


class TestApiRequestAuthorization:
    """Tests for ApiRequest.authorization_header and execute."""

    def test_none_auth(self, session_client):
        request = ApiRequest(ApiRequestConfig(auth_type=AuthType.NONE, client=session_client))

        assert request.authorization_header is None

    def test_app_header(self, app_client):
        request = ApiRequest(ApiRequestConfig(auth_type=AuthType.APP, client=app_client))

        assert request.authorization_header == AuthorizationHeader(
            "Authorization", f"Basic {b64('kid_app:app-secret')}"
        )

    def test_session_header(self, session_client):
        request = ApiRequest(ApiRequestConfig(auth_type=AuthType.SESSION, client=session_client))

        assert request.authorization_header.value == "Kinvey session-token-123"

    def test_default_surfaces_session_error(self, app_client):
        request = ApiRequest(ApiRequestConfig(client=app_client))

        with pytest.raises(NoActiveSessionError):
            request.authorization_header

    @pytest.mark.asyncio
    async def test_execute_merges_header(self, master_client):
        transport = RecordingTransport()
        config = ApiRequestConfig(
            url="https://baas.kinvey.com/appdata/kid_app/books",
            auth_type=AuthType.ALL,
            client=master_client,
        )
        request = ApiRequest(config, transport=transport)

        await request.execute()

        sent = transport.sent[0]
        assert sent.headers["Authorization"] == f"Basic {b64('kid_app:master-secret')}"
        assert sent.headers["X-Kinvey-Api-Version"] == "4"
        assert config.base_headers.get("authorization") == sent.headers["Authorization"]
        assert request.is_executing() is True

    @pytest.mark.asyncio
    async def test_execute_without_auth_header(self, empty_client):
        request = ApiRequest(ApiRequestConfig(auth_type="None", client=empty_client))

        prepared = await request.execute()

        assert "Authorization" not in prepared.headers

    @pytest.mark.asyncio
    async def test_execute_auth_failure_stays_idle(self, empty_client):
        request = ApiRequest(ApiRequestConfig(auth_type=AuthType.APP, client=empty_client))

        with pytest.raises(CredentialsMissingError):
            await request.execute()

        assert request.is_executing() is False

    @pytest.mark.asyncio
    async def test_execute_twice(self, app_client):
        request = ApiRequest(ApiRequestConfig(auth_type=AuthType.APP, client=app_client))
        await request.execute()

        with pytest.raises(ReentrancyError):
            await request.execute()

    # State: oversized properties fail before anything is handed off
    @pytest.mark.asyncio
    async def test_execute_header_failure_stays_idle(self, app_client, settings):
        transport = RecordingTransport()
        config = ApiRequestConfig(
            properties={"k": "v" * 56},
            auth_type=AuthType.APP,
            client=app_client,
            settings=settings,
        )
        request = ApiRequest(config, transport=transport)

        with pytest.raises(PropertiesTooLargeError):
            await request.execute()

        assert request.is_executing() is False
        assert transport.sent == []

        config.properties = {"k": "v"}
        await request.execute()

        assert request.is_executing() is True
        assert len(transport.sent) == 1

    # State: reentrancy is checked before auth is resolved again
    @pytest.mark.asyncio
    async def test_execute_twice_after_client_change(self, session_client):
        config = ApiRequestConfig(auth_type=AuthType.SESSION, client=session_client)
        request = ApiRequest(config)
        await request.execute()
        config.client = ClientContext()

        with pytest.raises(ReentrancyError):
            await request.execute()

        assert config.base_headers.get("Authorization") == "Kinvey session-token-123"

    # Decision: headers proxy is a computed snapshot; base_headers persists
    @pytest.mark.asyncio
    async def test_base_headers_proxy(self, app_client):
        request = ApiRequest(ApiRequestConfig(auth_type=AuthType.APP, client=app_client))
        request.headers.set("X-Lost", "1")
        request.base_headers.set("X-Kept", "1")

        prepared = await request.execute()

        assert "X-Lost" not in prepared.headers
        assert prepared.headers["X-Kept"] == "1"

    @pytest.mark.asyncio
    async def test_execute_uses_query_url(self, app_client):
        request = ApiRequest(
            ApiRequestConfig(
                url="https://x/y",
                query={"a": 1},
                auth_type=AuthType.APP,
                client=app_client,
            )
        )

        prepared = await request.execute()

        assert prepared.url == "https://x/y?a=1"

    def test_to_json_includes_query(self, app_client):
        query = {"limit": 5}
        request = ApiRequest(ApiRequestConfig(url="https://x/y", query=query, client=app_client))
        snapshot = request.to_json()

        assert snapshot["query"] is query
        assert snapshot["url"] == "https://x/y?limit=5"
        assert snapshot["headers"]["X-Kinvey-Custom-Request-Properties"] == "{}"
