"""FastAPI dependencies for the Firecrawl integration."""

from collections.abc import AsyncGenerator

from renoplan.integrations.firecrawl.client import FirecrawlClient
from renoplan.integrations.firecrawl.config import get_firecrawl_settings


async def get_firecrawl_client() -> AsyncGenerator[FirecrawlClient, None]:
    """
    FastAPI dependency for a request-scoped Firecrawl client.

    Yields:
        FirecrawlClient: Client closed after the request
    """
    client = FirecrawlClient(settings=get_firecrawl_settings())
    try:
        yield client
    finally:
        await client.close()
