"""Unit tests for PexelsProvider.

This module tests the Pexels image search including response parsing
and the guarantee that failures degrade to no image.
"""
import pytest
import random
from unittest.mock import AsyncMock, MagicMock, patch
import httpx

from app.providers import NullImageProvider, ProviderError
from app.providers.models import Photo
from app.providers.pexels import PexelsProvider, get_image_provider


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def mock_client():
    """Mock httpx AsyncClient."""
    with patch("httpx.AsyncClient") as mock:
        client_instance = AsyncMock()
        mock.return_value = client_instance
        yield client_instance


@pytest.fixture
def provider(mock_client):
    """Create PexelsProvider instance."""
    return PexelsProvider(api_key="test-key", rng=random.Random(0))


def _photos_response(photos):
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = {"photos": photos}
    return resp


# ============================================================================
# Tests for search
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestSearch:
    """Test search method."""

    async def test_success(self, provider, mock_client):
        """✅ Success → Photo with medium image and photographer."""
        mock_client.get.return_value = _photos_response([
            {
                "url": "https://www.pexels.com/photo/1",
                "photographer": "Jane Doe",
                "src": {"original": "https://images/1.jpeg", "medium": "https://images/1-m.jpeg"}
            }
        ])

        photo = await provider.search("finance")

        assert photo == Photo(
            image_url="https://images/1-m.jpeg",
            photographer="Jane Doe",
            source_url="https://www.pexels.com/photo/1"
        )

        args, kwargs = mock_client.get.call_args
        assert args[0] == "https://api.pexels.com/v1/search"
        assert kwargs["params"]["query"] == "finance"
        assert kwargs["params"]["per_page"] == 80
        assert kwargs["headers"] == {"Authorization": "test-key"}

    async def test_no_photos(self, provider, mock_client):
        """✅ Empty result → None."""
        mock_client.get.return_value = _photos_response([])

        assert await provider.search("finance") is None

    async def test_http_error_degrades(self, provider, mock_client):
        """✅ HTTP error → None, not an exception."""
        mock_client.get.side_effect = httpx.HTTPError("Connection failed")

        assert await provider.search("finance") is None

    async def test_403_degrades(self, provider, mock_client):
        """✅ Rejected key → None."""
        error_resp = MagicMock()
        error_resp.status_code = 403
        mock_client.get.side_effect = httpx.HTTPStatusError("403 Forbidden", request=None, response=error_resp)

        assert await provider.search("finance") is None

    async def test_missing_key_skips_request(self, mock_client):
        """✅ No key → None without calling the API."""
        provider = PexelsProvider(api_key=None)
        provider.api_key = None

        assert await provider.search("finance") is None
        mock_client.get.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
class TestFetchPhoto:
    """Test fetch_photo error mapping."""

    async def test_rate_limit(self, provider, mock_client):
        """✅ 429 → ProviderError with rate limit message."""
        error_resp = MagicMock()
        error_resp.status_code = 429
        mock_client.get.side_effect = httpx.HTTPStatusError("429", request=None, response=error_resp)

        with pytest.raises(ProviderError) as exc:
            await provider.fetch_photo("finance")

        assert "rate limit" in str(exc.value)

    async def test_malformed_payload(self, provider, mock_client):
        """✅ Unexpected payload → ProviderError."""
        resp = MagicMock()
        resp.json.side_effect = ValueError("not json")
        mock_client.get.return_value = resp

        with pytest.raises(ProviderError):
            await provider.fetch_photo("finance")


@pytest.mark.unit
class TestParsing:
    """Test parsing logic."""

    def test_falls_back_to_original(self, provider):
        """✅ No medium size → original URL."""
        photo = provider._parse_photo({"photographer": "A", "src": {"original": "o.jpg"}})
        assert photo.image_url == "o.jpg"

    def test_missing_src(self, provider):
        """✅ No src → null image."""
        photo = provider._parse_photo({})
        assert photo.image_url is None
        assert photo.photographer is None


@pytest.mark.unit
class TestFactory:
    """Test get_image_provider."""

    def test_null_without_key(self):
        """✅ Disabled → NullImageProvider."""
        with patch("app.providers.pexels.settings") as mock_settings:
            mock_settings.image_provider_enabled = False
            assert isinstance(get_image_provider(), NullImageProvider)

    def test_pexels_with_key(self, mock_client):
        """✅ Enabled → PexelsProvider."""
        with patch("app.providers.pexels.settings") as mock_settings:
            mock_settings.image_provider_enabled = True
            mock_settings.pexels_api_key = "k"
            mock_settings.image_timeout_seconds = 5.0
            assert isinstance(get_image_provider(), PexelsProvider)

    @pytest.mark.asyncio
    async def test_null_provider_returns_none(self):
        """✅ NullImageProvider never finds anything."""
        assert await NullImageProvider().search("finance") is None
