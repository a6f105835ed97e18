"""
Tests for the aiohttp web application.
"""

import pytest
from aiohttp import test_utils

from fwproxy.core.exceptions import UpstreamError
from fwproxy.server.app import create_app, cors_headers

from conftest import FIRMWARE_BYTES, FIRMWARE_URL, RELEASES_URL

CORS = {
    "Access-Control-Allow-Origin": "https://netham45.org",
    "Access-Control-Allow-Methods": "GET",
    "Access-Control-Allow-Headers": "*",
}


def assert_cors(resp) -> None:
    for name, value in CORS.items():
        assert resp.headers[name] == value


@pytest.fixture
def app(config, handler):
    return create_app(config, handler)


class TestForwardEndpoint:
    """Tests for the forwarding endpoint."""

    @pytest.mark.asyncio
    async def test_fetch_and_replay(self, app, mock_client):
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            first = await client.get("/proxy.php", params={"url": FIRMWARE_URL})
            assert first.status == 200
            assert first.headers["Content-Type"] == "application/octet-stream"
            assert first.headers["X-Cache"] == "MISS"
            assert await first.read() == FIRMWARE_BYTES
            assert_cors(first)

            second = await client.get("/proxy.php", params={"url": FIRMWARE_URL})
            assert second.status == 200
            assert second.headers["Content-Type"] == "application/octet-stream"
            assert second.headers["X-Cache"] == "HIT"
            assert await second.read() == FIRMWARE_BYTES

        assert mock_client.fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_api_response_is_json(self, app, mock_client, api_response):
        mock_client.fetch.return_value = api_response

        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.get("/proxy.php", params={"url": RELEASES_URL})
            assert resp.status == 200
            assert resp.headers["Content-Type"] == "application/json"
            assert await resp.json() == [{"tag_name": "v1.0"}]

    @pytest.mark.asyncio
    async def test_missing_url(self, app, mock_client):
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.get("/proxy.php")
            assert resp.status == 400
            assert await resp.text() == "URL parameter required"
            assert resp.headers["Content-Type"].startswith("text/plain")
            assert_cors(resp)

        mock_client.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_forbidden_url(self, app, mock_client):
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.get("/proxy.php", params={"url": "https://example.com/x"})
            assert resp.status == 403
            assert await resp.text() == (
                "Only URLs from github.com/netham45/esp32-scream-receiver are allowed"
            )
            assert_cors(resp)

        mock_client.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_upstream_failure(self, app, mock_client):
        mock_client.fetch.side_effect = UpstreamError(FIRMWARE_URL, "Could not resolve host")

        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.get("/proxy.php", params={"url": FIRMWARE_URL})
            assert resp.status == 500
            assert await resp.text() == "Proxy Error: Could not resolve host"
            assert_cors(resp)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "?url=https://example.com/"])
    async def test_options_preflight(self, app, mock_client, query):
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.options(f"/proxy.php{query}")
            assert resp.status == 200
            assert await resp.read() == b""
            assert_cors(resp)

        mock_client.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_custom_path_and_origin(self, config, handler):
        config.endpoint_path = "/fw"
        config.allowed_origin = "https://example.org"
        app = create_app(config, handler)

        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.get("/fw", params={"url": FIRMWARE_URL})
            assert resp.status == 200
            assert resp.headers["Access-Control-Allow-Origin"] == "https://example.org"

            missing = await client.get("/proxy.php", params={"url": FIRMWARE_URL})
            assert missing.status == 404

    @pytest.mark.asyncio
    async def test_cleanup_closes_handler(self, app, mock_client):
        async with test_utils.TestClient(test_utils.TestServer(app)):
            pass
        mock_client.close.assert_awaited_once()


class TestHealth:
    """Tests for the health route."""

    @pytest.mark.asyncio
    async def test_health(self, app):
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            resp = await client.get("/health")
            assert resp.status == 200
            assert await resp.text() == "ok"


def test_cors_headers():
    assert cors_headers("https://netham45.org") == CORS
