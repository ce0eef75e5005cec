"""
Admin router: dashboard stats and role management.
"""

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from renoplan.admin.schemas import (
    AdminStatsResponse,
    AdminUserListResponse,
    RoleChangeResponse,
)
from renoplan.admin.service import AdminService
from renoplan.auth.dependencies import require_admin
from renoplan.auth.schemas import SessionContext
from renoplan.db.database import get_db
from renoplan.utils.logger import logger

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_service(session: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(session)


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    _: SessionContext = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminStatsResponse:
    return await admin_service.get_stats()


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    _: SessionContext = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminUserListResponse:
    users = await admin_service.list_users()
    return AdminUserListResponse(users=users, total=len(users))


async def _change_admin(
    user_id: str, is_admin: bool, context: SessionContext, admin_service: AdminService
) -> RoleChangeResponse:
    try:
        changed = await admin_service.set_admin(user_id, is_admin)
        await admin_service.session.commit()

        logger.info(
            "Admin role changed",
            target_user_id=user_id,
            is_admin=is_admin,
            changed=changed,
            by_user_id=context.user_id,
        )
        return RoleChangeResponse(user_id=user_id, is_admin=is_admin, changed=changed)

    except Exception as e:
        await admin_service.session.rollback()
        logger.error("Failed to change admin role", error=str(e), target_user_id=user_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to change admin role: {str(e)}",
        )


@router.post("/users/{user_id}/admin", response_model=RoleChangeResponse)
async def grant_admin(
    user_id: str,
    context: SessionContext = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> RoleChangeResponse:
    return await _change_admin(user_id, True, context, admin_service)


@router.delete("/users/{user_id}/admin", response_model=RoleChangeResponse)
async def revoke_admin(
    user_id: str,
    context: SessionContext = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> RoleChangeResponse:
    """Revoke admin. Admins cannot revoke their own role."""
    if user_id == context.user_id:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST, detail="Cannot revoke your own admin role"
        )
    return await _change_admin(user_id, False, context, admin_service)
