"""Firecrawl integration constants."""

from enum import Enum


class FirecrawlEndpoint(str, Enum):
    """Firecrawl API endpoints."""

    SCRAPE = "/v1/scrape"


class ScrapeFormat(str, Enum):
    MARKDOWN = "markdown"
    HTML = "html"
    LINKS = "links"
