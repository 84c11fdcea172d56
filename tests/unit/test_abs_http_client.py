# ABOUTME: Unit tests for the Audiobookshelf HTTP client.
# ABOUTME: Tests the HttpClient protocol, bearer auth, retries, rate limiting, and error handling.

import json
import time

import httpx
import pytest

from shelfsync.audiobookshelf.http import AbsHttpClient, AbsRequestError, HttpClient

BASE_URL = "https://abs.example.com"


class FakeTransport(httpx.BaseTransport):
    """Fake transport for httpx that returns canned responses and records requests."""

    def __init__(self, responses: list[httpx.Response] | None = None) -> None:
        self._responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, json={"ok": True})

    @property
    def call_count(self) -> int:
        return len(self.requests)


def _client(transport: httpx.BaseTransport, **kwargs) -> AbsHttpClient:
    kwargs.setdefault("min_request_interval", 0.0)
    return AbsHttpClient(BASE_URL, transport=transport, **kwargs)


class TestHttpClientProtocol:
    """Tests for HttpClient protocol compliance."""

    def test_abs_client_satisfies_protocol(self) -> None:
        """AbsHttpClient satisfies the HttpClient protocol."""
        assert isinstance(_client(FakeTransport()), HttpClient)


class TestAbsHttpClient:
    """Tests for AbsHttpClient concrete class."""

    def test_get_returns_json(self) -> None:
        """GET request returns parsed JSON response."""
        transport = FakeTransport()
        result = _client(transport).get("/api/libraries", params={"q": "test"})
        assert result == {"ok": True}
        assert str(transport.requests[0].url) == f"{BASE_URL}/api/libraries?q=test"

    def test_post_sends_json_body(self) -> None:
        """POST requests carry a JSON body."""
        transport = FakeTransport()
        _client(transport).post("/login", json={"username": "reader", "password": "pw"})
        request = transport.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {"username": "reader", "password": "pw"}

    def test_patch_with_list_body(self) -> None:
        """PATCH accepts a JSON list and tolerates an empty response body."""
        transport = FakeTransport(responses=[httpx.Response(200)])
        result = _client(transport).patch("/api/me/progress/batch/update", json=[{"a": 1}])
        assert result == {}
        assert transport.requests[0].method == "PATCH"
        assert json.loads(transport.requests[0].content) == [{"a": 1}]

    def test_non_json_body_is_empty_dict(self) -> None:
        """A plain-text 'OK' response is treated as an empty payload."""
        transport = FakeTransport(responses=[httpx.Response(200, text="OK")])
        assert _client(transport).patch("/api/me/progress/batch/update", json=[]) == {}

    def test_bearer_token(self) -> None:
        """set_token adds an Authorization header to later requests."""
        transport = FakeTransport()
        client = _client(transport)
        client.set_token("abc123")
        client.get("/api/libraries")
        assert transport.requests[0].headers["authorization"] == "Bearer abc123"

    def test_user_agent_header(self) -> None:
        """Requests include the shelfsync User-Agent header."""
        transport = FakeTransport()
        _client(transport).get("/api/libraries")
        assert "shelfsync/" in transport.requests[0].headers["user-agent"]

    def test_rate_limiting_delays_requests(self) -> None:
        """Consecutive requests are delayed by min_request_interval."""
        transport = FakeTransport()
        interval = 0.15
        client = _client(transport, min_request_interval=interval)

        start = time.monotonic()
        client.get("/1")
        client.get("/2")
        elapsed = time.monotonic() - start

        assert elapsed >= interval
        assert transport.call_count == 2

    def test_http_error_raises_with_status(self) -> None:
        """Non-retryable HTTP errors raise AbsRequestError carrying the status."""
        transport = FakeTransport(responses=[httpx.Response(404, json={"error": "nope"})])
        with pytest.raises(AbsRequestError, match="404") as excinfo:
            _client(transport).get("/api/me/progress/li_1")
        assert excinfo.value.status_code == 404
        assert transport.call_count == 1

    def test_retry_on_429(self) -> None:
        """Client retries on 429 status and succeeds on next attempt."""
        responses = [
            httpx.Response(429, json={"error": "rate limited"}),
            httpx.Response(200, json={"ok": True}),
        ]
        transport = FakeTransport(responses=responses)
        result = _client(transport, retry_delay=0.01).get("/api/libraries")
        assert result == {"ok": True}
        assert transport.call_count == 2

    def test_retry_exhausted_raises(self) -> None:
        """After max retries, raises AbsRequestError."""
        responses = [httpx.Response(500, json={"error": "server error"})] * 4
        transport = FakeTransport(responses=responses)
        client = _client(transport, max_retries=3, retry_delay=0.01)

        with pytest.raises(AbsRequestError, match="500"):
            client.get("/api/libraries")
        assert transport.call_count == 4  # 1 initial + 3 retries

    def test_transport_error_has_no_status(self) -> None:
        """Connection failures raise AbsRequestError without a status code."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(httpx.MockTransport(refuse))
        with pytest.raises(AbsRequestError, match="Request failed") as excinfo:
            client.get("/api/libraries")
        assert excinfo.value.status_code is None
