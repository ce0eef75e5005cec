"""Async Firecrawl API client."""

import httpx
from pydantic import ValidationError

from renoplan.integrations.firecrawl.config import FirecrawlSettings, get_firecrawl_settings
from renoplan.integrations.firecrawl.constants import FirecrawlEndpoint
from renoplan.integrations.firecrawl.exceptions import (
    FirecrawlAuthenticationError,
    FirecrawlError,
    FirecrawlRateLimitError,
    FirecrawlServerError,
)
from renoplan.integrations.firecrawl.schemas import ScrapeRequest, ScrapeResult
from renoplan.utils.logger import logger


class FirecrawlClient:
    """Async client for the Firecrawl scrape API."""

    def __init__(
        self,
        settings: FirecrawlSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Firecrawl client.

        Args:
            settings: Firecrawl settings; the global settings when omitted
            transport: Optional httpx transport (tests)
        """
        self.settings = settings or get_firecrawl_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> None:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                headers={
                    "Authorization": f"Bearer {self.settings.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.settings.timeout,
                transport=self._transport,
            )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _make_request(self, method: str, endpoint: str, data: dict | None = None) -> dict:
        """Make an HTTP request to the Firecrawl API.

        Raises:
            FirecrawlError: For API and transport errors
        """
        await self._ensure_client()

        try:
            response = await self._client.request(method, endpoint, json=data)

            if response.status_code == 401:
                raise FirecrawlAuthenticationError()
            elif response.status_code == 429:
                raise FirecrawlRateLimitError()
            elif response.status_code >= 500:
                raise FirecrawlServerError(
                    f"Server error: {response.status_code}", status_code=response.status_code
                )

            response.raise_for_status()
            return response.json()

        except FirecrawlError:
            raise
        except httpx.HTTPStatusError as e:
            raise FirecrawlError(
                f"HTTP error: {e.response.status_code} {e.response.text[:200]}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise FirecrawlError(f"Request error: {e}") from e
        except ValueError as e:
            raise FirecrawlError(f"Invalid JSON response: {e}") from e

    async def scrape(self, request: ScrapeRequest) -> ScrapeResult:
        """Scrape one page.

        Args:
            request: URL and output formats

        Returns:
            ScrapeResult: Page content in the requested formats

        Raises:
            FirecrawlError: For API errors
        """
        logger.info("Scraping page", url=request.url)

        response_data = await self._make_request(
            "POST", FirecrawlEndpoint.SCRAPE.value, request.model_dump(mode="json")
        )

        try:
            return ScrapeResult.model_validate(response_data.get("data") or {})
        except ValidationError as e:
            logger.error("Failed to parse scrape response", error=str(e))
            raise FirecrawlError(f"Invalid response format: {e}") from e
