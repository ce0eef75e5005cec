"""
Vendor administration router. Every route requires the admin role.
"""

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from renoplan.auth.dependencies import require_admin
from renoplan.db.dependencies import get_vendor_repository
from renoplan.db.vendors.repository import VendorRepository
from renoplan.db.vendors.schemas import (
    CreateVendorRequest,
    UpdateVendorRequest,
    VendorListResponse,
    VendorResponse,
)
from renoplan.utils.logger import logger

router = APIRouter(
    prefix="/vendors", tags=["Vendors"], dependencies=[Depends(require_admin)]
)


def _not_found(vendor_id: str) -> HTTPException:
    return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=f"Vendor {vendor_id} not found")


def _duplicate(name: str | None) -> HTTPException:
    return HTTPException(
        status_code=HTTPStatus.CONFLICT, detail=f"Vendor named {name!r} already exists"
    )


@router.get("", response_model=VendorListResponse)
async def list_vendors(
    vendor_repository: VendorRepository = Depends(get_vendor_repository),
) -> VendorListResponse:
    vendors = await vendor_repository.list_vendors()
    return VendorListResponse(
        vendors=[VendorResponse.model_validate(v) for v in vendors], total=len(vendors)
    )


@router.post("", response_model=VendorResponse, status_code=HTTPStatus.CREATED)
async def create_vendor(
    request: CreateVendorRequest,
    vendor_repository: VendorRepository = Depends(get_vendor_repository),
) -> VendorResponse:
    """
    Register a vendor.

    Raises:
        HTTPException: 409 if the name is taken
    """
    try:
        vendor = await vendor_repository.create_vendor(**request.model_dump())
        await vendor_repository.session.commit()
        return VendorResponse.model_validate(vendor)

    except IntegrityError:
        await vendor_repository.session.rollback()
        raise _duplicate(request.name)
    except Exception as e:
        await vendor_repository.session.rollback()
        logger.error("Failed to create vendor", error=str(e), vendor=request.name)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to create vendor: {str(e)}",
        )


@router.patch("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: str,
    request: UpdateVendorRequest,
    vendor_repository: VendorRepository = Depends(get_vendor_repository),
) -> VendorResponse:
    changes = request.model_dump(exclude_unset=True)
    try:
        vendor = await vendor_repository.update_vendor(vendor_id, changes)
        if not vendor:
            raise _not_found(vendor_id)

        await vendor_repository.session.commit()
        return VendorResponse.model_validate(vendor)

    except HTTPException:
        raise
    except IntegrityError:
        await vendor_repository.session.rollback()
        raise _duplicate(changes.get("name"))
    except Exception as e:
        await vendor_repository.session.rollback()
        logger.error("Failed to update vendor", error=str(e), vendor_id=vendor_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to update vendor: {str(e)}",
        )


@router.post("/{vendor_id}/toggle", response_model=VendorResponse)
async def toggle_vendor(
    vendor_id: str,
    vendor_repository: VendorRepository = Depends(get_vendor_repository),
) -> VendorResponse:
    """Activate an inactive vendor or deactivate an active one."""
    try:
        vendor = await vendor_repository.toggle_active(vendor_id)
        if not vendor:
            raise _not_found(vendor_id)

        await vendor_repository.session.commit()
        return VendorResponse.model_validate(vendor)

    except HTTPException:
        raise
    except Exception as e:
        await vendor_repository.session.rollback()
        logger.error("Failed to toggle vendor", error=str(e), vendor_id=vendor_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to toggle vendor: {str(e)}",
        )


@router.delete("/{vendor_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_vendor(
    vendor_id: str,
    vendor_repository: VendorRepository = Depends(get_vendor_repository),
) -> None:
    try:
        if not await vendor_repository.delete_vendor(vendor_id):
            raise _not_found(vendor_id)
        await vendor_repository.session.commit()

    except HTTPException:
        raise
    except Exception as e:
        await vendor_repository.session.rollback()
        logger.error("Failed to delete vendor", error=str(e), vendor_id=vendor_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete vendor: {str(e)}",
        )
