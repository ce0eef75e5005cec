"""Request/response models for vendor product search."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from renoplan.db.boms.schemas import ProductMatchResponse
from renoplan.products.constants import DEFAULT_MATCH_SCORE


class ProductSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bom_item_id: str = Field(..., alias="bomItemId")
    search_query: str = Field(..., min_length=1, alias="searchQuery")
    vendors: list[str] | None = Field(
        None, description="Restrict the search to these vendor names"
    )
    language: str = Field("en", description="Prompt language: en or ro")


class ProductSearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    match_count: int = Field(..., alias="matchCount")
    matches: list[ProductMatchResponse]
    message: str | None = None
    error: str | None = None


class ExtractedProduct(BaseModel):
    """One product as returned by the `extract_products` function."""

    product_name: str = Field(..., min_length=1)
    price: float | None = None
    product_url: str | None = None
    image_url: str | None = None
    in_stock: bool | None = None
    match_score: float | None = None

    def to_match(self, vendor: str, search_url: str, raw: dict[str, Any]) -> dict[str, Any]:
        """Column values for a product match, with defaults for missing fields."""
        return {
            "vendor": vendor,
            "product_name": self.product_name,
            "product_url": self.product_url or search_url,
            "image_url": self.image_url or None,
            "price": self.price,
            "in_stock": self.in_stock is not False,
            "match_score": self.match_score or DEFAULT_MATCH_SCORE,
            "product_details": {"raw_data": raw},
        }
