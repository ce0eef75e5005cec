"""FastAPI router for vendor product search."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from renoplan.ai.gateway.client import GatewayClient, get_gateway_client
from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.db.boms.repository import BOMRepository
from renoplan.db.boms.schemas import ProductMatchResponse
from renoplan.db.dependencies import get_bom_repository, get_vendor_repository
from renoplan.db.vendors.repository import VendorRepository
from renoplan.integrations.firecrawl.client import FirecrawlClient
from renoplan.integrations.firecrawl.dependencies import get_firecrawl_client
from renoplan.products.constants import NO_PRODUCTS_MESSAGE, NO_VENDORS_ERROR
from renoplan.products.schemas import ProductSearchRequest, ProductSearchResponse
from renoplan.products.service import ProductSearchService
from renoplan.utils.logger import logger
from renoplan.utils.responses import error_response

router = APIRouter(prefix="/products", tags=["Products"])


def get_product_search_service(
    gateway: GatewayClient = Depends(get_gateway_client),
    firecrawl: FirecrawlClient = Depends(get_firecrawl_client),
    boms: BOMRepository = Depends(get_bom_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
) -> ProductSearchService:
    return ProductSearchService(gateway, firecrawl, boms, vendors)


@router.post(
    "/search", response_model=ProductSearchResponse, response_model_exclude_none=True
)
async def search_products(
    request: ProductSearchRequest,
    context: SessionContext = Depends(get_session_context),
    boms: BOMRepository = Depends(get_bom_repository),
    service: ProductSearchService = Depends(get_product_search_service),
) -> ProductSearchResponse | JSONResponse:
    """Search every active vendor for products matching a BOM item."""
    item = await boms.get_item(request.bom_item_id, context.user_id)
    if not item:
        return error_response("BOM item not found", status_code=404)

    try:
        matches, vendor_count = await service.search(
            item, request.search_query, request.vendors, request.language
        )
    except Exception as e:
        await boms.session.rollback()
        logger.error("Error searching products", bom_item_id=request.bom_item_id, error=str(e))
        return error_response("Failed to search products", status_code=500)

    if vendor_count == 0:
        return ProductSearchResponse(
            success=False, match_count=0, matches=[], error=NO_VENDORS_ERROR
        )

    return ProductSearchResponse(
        success=bool(matches),
        match_count=len(matches),
        matches=[ProductMatchResponse.model_validate(m) for m in matches],
        message=None if matches else NO_PRODUCTS_MESSAGE,
    )
