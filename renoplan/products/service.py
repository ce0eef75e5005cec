"""
Vendor product search.

For each active vendor: scrape its search results page, let the model pick out
products matching the BOM item, and store them as product matches. A vendor
that fails is logged and skipped.
"""

from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from renoplan.ai.gateway.client import GatewayClient
from renoplan.ai.gateway.exceptions import GatewayError
from renoplan.db.boms.model import BOMItem, ProductMatch
from renoplan.db.boms.repository import BOMRepository
from renoplan.db.vendors.model import Vendor
from renoplan.db.vendors.repository import VendorRepository
from renoplan.integrations.firecrawl.client import FirecrawlClient
from renoplan.integrations.firecrawl.exceptions import FirecrawlError
from renoplan.integrations.firecrawl.schemas import ScrapeRequest
from renoplan.products.constants import (
    EXTRACT_PRODUCTS_TOOL,
    MAX_CONTENT_CHARS,
    SYSTEM_PROMPTS,
    USER_PROMPTS,
)
from renoplan.products.schemas import ExtractedProduct
from renoplan.utils.logger import logger


def encode_query(query: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(query, safe="-_.!~*'()")


def build_search_url(vendor: Vendor, query: str) -> str:
    return vendor.build_search_url(encode_query(query))


def build_extraction_messages(
    item: BOMItem, vendor_name: str, content: str, language: str
) -> list[dict[str, Any]]:
    language = language if language in SYSTEM_PROMPTS else "en"
    system = SYSTEM_PROMPTS[language].format(
        item_name=item.item_name,
        description=item.description or "N/A",
        category=item.category,
        unit=item.unit,
        vendor=vendor_name,
    )
    user = USER_PROMPTS[language].format(
        vendor=vendor_name, content=content[:MAX_CONTENT_CHARS]
    )
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


class ProductSearchService:
    def __init__(
        self,
        gateway: GatewayClient,
        firecrawl: FirecrawlClient,
        boms: BOMRepository,
        vendors: VendorRepository,
    ):
        self.gateway = gateway
        self.firecrawl = firecrawl
        self.boms = boms
        self.vendors = vendors

    async def search_vendor(
        self, item: BOMItem, vendor: Vendor, query: str, language: str
    ) -> list[dict[str, Any]]:
        """
        Scrape one vendor and extract matching products.

        Raises:
            FirecrawlError: Scrape failed
            GatewayError: Extraction failed
        """
        search_url = build_search_url(vendor, query)
        logger.info("Searching vendor", vendor=vendor.name, url=search_url)

        page = await self.firecrawl.scrape(ScrapeRequest(url=search_url))
        logger.info(
            "Scraped vendor",
            vendor=vendor.name,
            markdown_length=len(page.markdown),
            html_length=len(page.html),
        )

        arguments = await self.gateway.call_function(
            model=self.gateway.settings.text_model,
            messages=build_extraction_messages(item, vendor.name, page.markdown, language),
            tool=EXTRACT_PRODUCTS_TOOL,
        )

        matches: list[dict[str, Any]] = []
        for raw in arguments.get("products") or []:
            try:
                product = ExtractedProduct.model_validate(raw)
            except ValidationError as e:
                logger.warning("Dropping invalid product", vendor=vendor.name, error=str(e))
                continue
            matches.append(product.to_match(vendor.name, search_url, raw))

        logger.info("Extracted products", vendor=vendor.name, count=len(matches))
        return matches

    async def search(
        self,
        item: BOMItem,
        query: str,
        vendor_names: list[str] | None = None,
        language: str = "en",
    ) -> tuple[list[ProductMatch], int]:
        """
        Search all active vendors for an item and store what is found.

        Returns:
            tuple[list[ProductMatch], int]: Stored matches and the number of
            vendors searched (0 means none are configured)
        """
        vendors = await self.vendors.list_active(vendor_names)
        if not vendors:
            logger.warning("No active vendors configured")
            return [], 0

        logger.info(
            "Product search start",
            bom_item_id=item.id,
            query=query,
            language=language,
            vendors=[v.name for v in vendors],
        )

        found: list[dict[str, Any]] = []
        for vendor in vendors:
            try:
                found.extend(await self.search_vendor(item, vendor, query, language))
            except (FirecrawlError, GatewayError) as e:
                logger.error(
                    "Vendor search failed",
                    vendor=vendor.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        if not found:
            logger.info("No products found from any vendor", bom_item_id=item.id)
            return [], len(vendors)

        stored = await self.boms.add_matches(item.id, found)
        return stored, len(vendors)
