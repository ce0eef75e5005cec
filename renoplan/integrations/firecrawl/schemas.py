"""Firecrawl request and response models."""

from pydantic import BaseModel, Field

from renoplan.integrations.firecrawl.constants import ScrapeFormat


class ScrapeRequest(BaseModel):
    url: str
    formats: list[ScrapeFormat] = Field(
        default_factory=lambda: [ScrapeFormat.MARKDOWN, ScrapeFormat.HTML, ScrapeFormat.LINKS]
    )


class ScrapeResult(BaseModel):
    """The `data` object of a scrape response."""

    markdown: str = ""
    html: str = ""
    links: list[str] = Field(default_factory=list)
