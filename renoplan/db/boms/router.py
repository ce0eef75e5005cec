"""
BOM router: review a bill of materials, pick products, build the shopping list.
"""

from collections import defaultdict
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.db.boms.repository import BOMRepository
from renoplan.db.boms.schemas import (
    BOMDetailResponse,
    BOMItemResponse,
    BOMResponse,
    ProductMatchListResponse,
    ProductMatchResponse,
    ShoppingListEntry,
    ShoppingListResponse,
    UpdateBOMStatusRequest,
)
from renoplan.db.dependencies import get_bom_repository
from renoplan.utils.logger import logger

router = APIRouter(prefix="/boms", tags=["BOMs"])


def _not_found(kind: str, resource_id: str) -> HTTPException:
    return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=f"{kind} {resource_id} not found")


@router.get("/{bom_id}", response_model=BOMDetailResponse)
async def get_bom(
    bom_id: str,
    context: SessionContext = Depends(get_session_context),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> BOMDetailResponse:
    """A BOM with its items, also grouped by category."""
    bom = await bom_repository.get_bom(bom_id, context.user_id)
    if not bom:
        raise _not_found("BOM", bom_id)

    items = [BOMItemResponse.model_validate(i) for i in await bom_repository.get_items(bom_id)]
    by_category: dict[str, list[BOMItemResponse]] = defaultdict(list)
    for item in items:
        by_category[item.category].append(item)

    return BOMDetailResponse(
        bom=BOMResponse.model_validate(bom),
        items=items,
        items_by_category=dict(by_category),
    )


@router.patch("/{bom_id}/status", response_model=BOMResponse)
async def update_bom_status(
    bom_id: str,
    request: UpdateBOMStatusRequest,
    context: SessionContext = Depends(get_session_context),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> BOMResponse:
    try:
        bom = await bom_repository.update_status(bom_id, context.user_id, request.status)
        if not bom:
            raise _not_found("BOM", bom_id)

        await bom_repository.session.commit()
        return BOMResponse.model_validate(bom)

    except HTTPException:
        raise
    except Exception as e:
        await bom_repository.session.rollback()
        logger.error("Failed to update BOM status", error=str(e), bom_id=bom_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to update BOM status: {str(e)}",
        )


@router.get("/{bom_id}/shopping-list", response_model=ShoppingListResponse)
async def get_shopping_list(
    bom_id: str,
    context: SessionContext = Depends(get_session_context),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> ShoppingListResponse:
    """Selected products of a BOM, each with the item it was chosen for."""
    if not await bom_repository.get_bom(bom_id, context.user_id):
        raise _not_found("BOM", bom_id)

    entries = []
    for match, item in await bom_repository.get_shopping_list(bom_id):
        line_total = match.price * item.quantity if match.price is not None else None
        entries.append(
            ShoppingListEntry(
                match=ProductMatchResponse.model_validate(match),
                item_name=item.item_name,
                category=item.category,
                quantity=item.quantity,
                unit=item.unit,
                line_total=line_total,
            )
        )

    return ShoppingListResponse(
        bom_id=bom_id,
        entries=entries,
        total=len(entries),
        estimated_total=sum(e.line_total or 0 for e in entries),
    )


@router.get("/items/{item_id}/matches", response_model=ProductMatchListResponse)
async def list_item_matches(
    item_id: str,
    context: SessionContext = Depends(get_session_context),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> ProductMatchListResponse:
    """Product matches for a BOM item, best match first."""
    if not await bom_repository.get_item(item_id, context.user_id):
        raise _not_found("BOM item", item_id)

    matches = await bom_repository.list_matches(item_id)
    return ProductMatchListResponse(
        matches=[ProductMatchResponse.model_validate(m) for m in matches],
        total=len(matches),
    )


async def _set_selected(
    match_id: str, selected: bool, user_id: str, bom_repository: BOMRepository
) -> ProductMatchResponse:
    try:
        match = await bom_repository.set_selected(match_id, user_id, selected)
        if not match:
            raise _not_found("Product match", match_id)

        await bom_repository.session.commit()
        return ProductMatchResponse.model_validate(match)

    except HTTPException:
        raise
    except Exception as e:
        await bom_repository.session.rollback()
        logger.error("Failed to update product selection", error=str(e), match_id=match_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to update product selection: {str(e)}",
        )


@router.post("/matches/{match_id}/select", response_model=ProductMatchResponse)
async def select_match(
    match_id: str,
    context: SessionContext = Depends(get_session_context),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> ProductMatchResponse:
    """Add a product to the shopping list."""
    return await _set_selected(match_id, True, context.user_id, bom_repository)


@router.delete("/matches/{match_id}/select", response_model=ProductMatchResponse)
async def unselect_match(
    match_id: str,
    context: SessionContext = Depends(get_session_context),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> ProductMatchResponse:
    """Remove a product from the shopping list."""
    return await _set_selected(match_id, False, context.user_id, bom_repository)
