"""
Authentication and authorization dependencies.

This module provides FastAPI dependencies that resolve the caller into a
SessionContext, optionally or mandatorily, and gate admin-only routes.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from renoplan.auth import schemas
from renoplan.auth.constants import Role
from renoplan.auth.service import AuthProvider, get_auth_provider
from renoplan.db.dependencies import get_user_role_repository
from renoplan.db.user_roles.repository import UserRoleRepository

security = HTTPBearer(auto_error=False)


async def get_auth_provider_dependency() -> AuthProvider:
    """Dependency to get the configured auth provider."""
    return get_auth_provider()


async def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    auth_provider: AuthProvider = Depends(get_auth_provider_dependency),
) -> schemas.Session:
    """
    Get the current user session from the authorization header.

    Raises:
        HTTPException: If the token is missing, invalid or expired
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authentication token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    session = await auth_provider.get_session(credentials.credentials)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_session_context(
    session: schemas.Session = Depends(get_current_session),
    roles: UserRoleRepository = Depends(get_user_role_repository),
) -> schemas.SessionContext:
    """Resolve the authenticated caller and their admin flag."""
    is_admin = await roles.has_role(session.user.id, Role.ADMIN)
    return schemas.SessionContext(user=session.user, is_admin=is_admin)


async def get_optional_session_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    auth_provider: AuthProvider = Depends(get_auth_provider_dependency),
    roles: UserRoleRepository = Depends(get_user_role_repository),
) -> schemas.SessionContext | None:
    """
    Like get_session_context, but returns None for anonymous callers.

    An invalid token is treated the same as no token.
    """
    if not credentials:
        return None

    session = await auth_provider.get_session(credentials.credentials)
    if not session:
        return None

    is_admin = await roles.has_role(session.user.id, Role.ADMIN)
    return schemas.SessionContext(user=session.user, is_admin=is_admin)


async def require_admin(
    context: schemas.SessionContext = Depends(get_session_context),
) -> schemas.SessionContext:
    if not context.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return context
