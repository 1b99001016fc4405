"""Pexels image provider implementation."""
import httpx
import random
from typing import Optional
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)
import logging
from app.providers import ImageProvider, NullImageProvider, ProviderError
from app.providers.models import Photo
from app.core.config import settings


logger = logging.getLogger(__name__)


class PexelsProvider(ImageProvider):
    """Pexels implementation of the image provider."""

    BASE_URL = "https://api.pexels.com"
    PER_PAGE = 80

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        rng: Optional[random.Random] = None
    ):
        self.api_key = api_key or settings.pexels_api_key
        self.client = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.image_timeout_seconds
        )
        self.rng = rng or random.Random()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        before_sleep=before_sleep_log(logger, logging.WARNING)
    )
    async def _make_request(self, url: str, params: dict) -> dict:
        """Make HTTP request with retry logic for transient failures.

        Retries timeouts and connection errors only; HTTP status errors
        are surfaced immediately.
        """
        response = await self.client.get(
            url,
            params=params,
            headers={"Authorization": self.api_key}
        )
        response.raise_for_status()
        return response.json()

    async def fetch_photo(self, query: str) -> Optional[Photo]:
        """
        Fetch a random photo for a query.

        Raises:
            ProviderError: If the API call fails
        """
        try:
            url = f"{self.BASE_URL}/v1/search"
            params = {"query": query, "per_page": self.PER_PAGE, "page": 1}

            data = await self._make_request(url, params)
            photos = data.get("photos") or []

            if not photos:
                logger.info(f"No Pexels photos for query '{query}'")
                return None

            return self._parse_photo(self.rng.choice(photos))

        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 403):
                raise ProviderError(f"Pexels API rejected the key ({e.response.status_code})")
            elif e.response.status_code == 429:
                raise ProviderError("Pexels API rate limit exceeded (429)")
            raise ProviderError(f"Pexels API error: {str(e)}")
        except httpx.TimeoutException as e:
            raise ProviderError(f"Pexels API timeout after retries: {str(e)}")
        except httpx.HTTPError as e:
            raise ProviderError(f"Pexels API connection error: {str(e)}")
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Unexpected error: {str(e)}")

    async def search(self, query: str) -> Optional[Photo]:
        """Fetch a photo, degrading every failure to None."""
        if not self.api_key:
            logger.warning("No Pexels API key configured. Returning no image.")
            return None

        try:
            return await self.fetch_photo(query)
        except ProviderError as e:
            logger.error(f"Image lookup failed: {e}")
            return None

    def _parse_photo(self, item: dict) -> Photo:
        """Parse a Pexels photo object."""
        src = item.get("src") or {}
        return Photo(
            image_url=src.get("medium") or src.get("original"),
            photographer=item.get("photographer"),
            source_url=item.get("url")
        )

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()


def get_image_provider() -> ImageProvider:
    """Build the configured provider (Pexels when a real key is set)."""
    if settings.image_provider_enabled:
        return PexelsProvider()
    logger.warning("PEXELS_API_KEY not set; hourly news will have no images")
    return NullImageProvider()

