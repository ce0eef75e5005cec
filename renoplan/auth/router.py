"""
Auth API router.
"""

from fastapi import APIRouter, Depends

from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import MeResponse, SessionContext

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/me", response_model=MeResponse)
async def get_me(context: SessionContext = Depends(get_session_context)) -> MeResponse:
    """Current user and whether they are an admin."""
    return MeResponse(user=context.user, is_admin=context.is_admin)
