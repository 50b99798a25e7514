"""Tests for the base HTTP client."""

import httpx
import pytest

from bitso_funds.services.shared.http_client import HTTPClient, TransportError


def make_http_client(handler) -> HTTPClient:
    return HTTPClient(
        base_url="https://example.test",
        timeout=5.0,
        headers={"Content-Type": "application/json"},
        transport=httpx.MockTransport(handler),
    )


class TestRequests:
    """Tests for successful requests."""

    def test_get_json_merges_headers_and_params(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": 1})

        with make_http_client(handler) as client:
            data = client.get_json("/path", params={"a": "1"}, headers={"X-Test": "yes"})

        assert data == {"ok": 1}
        assert seen[0].url == "https://example.test/path?a=1"
        assert seen[0].headers["X-Test"] == "yes"
        assert seen[0].headers["Content-Type"] == "application/json"

    def test_close_releases_client(self):
        client = make_http_client(lambda request: httpx.Response(200, json={}))
        client.get("/path")

        client.close()

        assert client._client is None


class TestErrors:
    """Tests for error mapping."""

    def test_http_status_error(self):
        client = make_http_client(lambda request: httpx.Response(403, text="forbidden"))

        with pytest.raises(TransportError) as exc_info:
            client.get("/path")

        assert exc_info.value.status_code == 403
        assert exc_info.value.response_body == "forbidden"

    def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow", request=request)

        client = make_http_client(handler)

        with pytest.raises(TransportError, match="timed out") as exc_info:
            client.get("/path")

        assert exc_info.value.status_code is None

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_http_client(handler)

        with pytest.raises(TransportError, match="Connection failed"):
            client.get("/path")

    def test_no_retry(self):
        """Test a failing request is attempted exactly once."""
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ReadTimeout("slow", request=request)

        client = make_http_client(handler)

        with pytest.raises(TransportError):
            client.get("/path")

        assert len(attempts) == 1
