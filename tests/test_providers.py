"""Tests for HTTP providers."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
import requests

from gospel_library_mcp.providers import FetchResult, RequestsProvider


def json_response(data, status_code: int = 200) -> Mock:
    mock_response = Mock()
    mock_response.json.return_value = data
    mock_response.status_code = status_code
    mock_response.elapsed.total_seconds.return_value = 0.123
    return mock_response


async def mock_executor(executor, func):
    return func()


class TestRequestsProvider:
    """Tests for RequestsProvider."""

    @pytest.fixture
    def provider(self) -> RequestsProvider:
        """Create a RequestsProvider instance."""
        return RequestsProvider(timeout=10)

    def test_supports_http_urls(self, provider: RequestsProvider) -> None:
        """Test that provider supports HTTP URLs."""
        assert provider.supports_url("http://example.com")
        assert provider.supports_url("https://www.churchofjesuschrist.org/search/proxy/vertex-search")

    def test_rejects_non_http_urls(self, provider: RequestsProvider) -> None:
        """Test that provider rejects non-HTTP URLs."""
        assert not provider.supports_url("ftp://example.com")
        assert not provider.supports_url("file:///path/to/file")
        assert not provider.supports_url("not a url")
        assert not provider.supports_url("")

    @pytest.mark.asyncio
    async def test_get_success(self, provider: RequestsProvider) -> None:
        """Test a GET call returning JSON."""
        mock_response = json_response({"items": []})

        with patch.object(provider.session, "get", return_value=mock_response) as mock_get:
            with patch("asyncio.get_event_loop") as mock_loop:
                mock_loop.return_value.run_in_executor = mock_executor
                result = await provider.fetch_json("https://example.com/api", params={"q": "faith"})

                mock_get.assert_called_once()
                call_args = mock_get.call_args
                assert call_args[0][0] == "https://example.com/api"
                assert call_args[1]["params"] == {"q": "faith"}
                assert call_args[1]["timeout"] == 10
                assert call_args[1]["headers"]["User-Agent"] == "Gospel-Library-MCP/0.1"
                assert call_args[1]["headers"]["Accept"] == "application/json"

                assert isinstance(result, FetchResult)
                assert result.url == "https://example.com/api"
                assert result.data == {"items": []}
                assert result.status_code == 200
                assert result.metadata["method"] == "GET"
                assert result.metadata["elapsed_ms"] == pytest.approx(123.0)

    @pytest.mark.asyncio
    async def test_payload_switches_to_post(self, provider: RequestsProvider) -> None:
        """Test that a payload is sent as a JSON POST."""
        mock_response = json_response({"items": []})

        with patch.object(provider.session, "post", return_value=mock_response) as mock_post:
            with patch.object(provider.session, "get") as mock_get:
                with patch("asyncio.get_event_loop") as mock_loop:
                    mock_loop.return_value.run_in_executor = mock_executor
                    result = await provider.fetch_json(
                        "https://example.com/api", payload={"query": "hope"}
                    )

                    mock_get.assert_not_called()
                    assert mock_post.call_args[1]["json"] == {"query": "hope"}
                    assert result.metadata["method"] == "POST"

    @pytest.mark.asyncio
    async def test_custom_timeout_and_headers(self, provider: RequestsProvider) -> None:
        """Test per-call timeout and header overrides."""
        mock_response = json_response({})

        with patch.object(provider.session, "get", return_value=mock_response) as mock_get:
            with patch("asyncio.get_event_loop") as mock_loop:
                mock_loop.return_value.run_in_executor = mock_executor
                await provider.fetch_json(
                    "https://example.com/api", timeout=3, headers={"User-Agent": "CustomBot/1.0"}
                )

                call_args = mock_get.call_args
                assert call_args[1]["timeout"] == 3
                assert call_args[1]["headers"]["User-Agent"] == "CustomBot/1.0"

    @pytest.mark.asyncio
    async def test_http_error(self, provider: RequestsProvider) -> None:
        """Test that HTTP errors propagate."""
        mock_response = Mock()
        mock_response.status_code = 404
        mock_response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")

        with patch.object(provider.session, "get", return_value=mock_response):
            with pytest.raises(requests.HTTPError):
                await provider.fetch_json("https://example.com/not-found")

    @pytest.mark.asyncio
    async def test_timeout_error(self, provider: RequestsProvider) -> None:
        """Test that timeouts propagate without a retry."""
        with patch.object(
            provider.session, "get", side_effect=requests.Timeout("Request timed out")
        ) as mock_get:
            with pytest.raises(requests.Timeout):
                await provider.fetch_json("https://slow.example.com")
            assert mock_get.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self, provider: RequestsProvider) -> None:
        """Test that an undecodable body raises ValueError."""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.side_effect = ValueError("Expecting value")

        with patch.object(provider.session, "get", return_value=mock_response):
            with pytest.raises(ValueError):
                await provider.fetch_json("https://example.com/html")
