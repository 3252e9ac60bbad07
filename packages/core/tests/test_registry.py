"""Tests for the npm registry client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from dtlens_core.registry import RegistryClient, homepage_of


def _response(status_code, payload=None):
    request = httpx.Request("GET", "https://registry.example/foo")
    return httpx.Response(status_code, json=payload if payload is not None else {}, request=request)


def _mock_client(response=None, error=None):
    client = AsyncMock()
    client.is_closed = False
    if error is not None:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    return client


class TestRegistryInfo:
    @pytest.mark.asyncio
    async def test_returns_document(self):
        client = _mock_client(_response(200, {"name": "foo", "homepage": "https://foo.dev"}))
        with patch("dtlens_core.registry.httpx.AsyncClient", return_value=client):
            async with RegistryClient(base_url="https://registry.example/") as registry:
                document = await registry.info("foo")
        assert document["homepage"] == "https://foo.dev"
        client.get.assert_awaited_once_with("https://registry.example/foo")
        client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_found_returns_none(self):
        client = _mock_client(_response(404, {"error": "Not found"}))
        with patch("dtlens_core.registry.httpx.AsyncClient", return_value=client):
            assert await RegistryClient().info("nope") is None

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        client = _mock_client(_response(500))
        with patch("dtlens_core.registry.httpx.AsyncClient", return_value=client):
            with pytest.raises(httpx.HTTPStatusError):
                await RegistryClient().info("foo")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        client = _mock_client(error=httpx.ConnectError("down"))
        with patch("dtlens_core.registry.httpx.AsyncClient", return_value=client):
            with pytest.raises(httpx.HTTPError):
                await RegistryClient().info("foo")

    @pytest.mark.asyncio
    async def test_empty_name_skips_request(self):
        factory = MagicMock()
        with patch("dtlens_core.registry.httpx.AsyncClient", factory):
            assert await RegistryClient().info("") is None
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_scoped_name_is_escaped(self):
        client = _mock_client(_response(200, {}))
        with patch("dtlens_core.registry.httpx.AsyncClient", return_value=client):
            await RegistryClient(base_url="https://registry.example").info("@types/foo")
        client.get.assert_awaited_once_with("https://registry.example/@types%2Ffoo")


class TestHomepageOf:
    def test_top_level_homepage(self):
        assert homepage_of({"homepage": "https://foo.dev"}) == "https://foo.dev"

    def test_falls_back_to_latest_version(self):
        document = {"dist-tags": {"latest": "2.0.0"}, "versions": {"2.0.0": {"homepage": "https://v2.dev"}}}
        assert homepage_of(document) == "https://v2.dev"

    def test_missing_homepage(self):
        assert homepage_of({"name": "foo"}) is None
        assert homepage_of(None) is None


class TestUnexpectedPayload:
    @pytest.mark.asyncio
    async def test_non_object_document_raises_value_error(self):
        client = _mock_client(_response(200, ["unexpected"]))
        with patch("dtlens_core.registry.httpx.AsyncClient", return_value=client):
            with pytest.raises(ValueError, match="Unexpected registry response"):
                await RegistryClient().info("foo")

    def test_homepage_of_ignores_non_object(self):
        assert homepage_of(["unexpected"]) is None
        assert homepage_of("https://foo.dev") is None
