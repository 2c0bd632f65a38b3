"""
Authentication dependencies for FastAPI.
"""

from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.domain.models.base import ValidationError
from app.domain.models.user import AuthenticatedUser
from app.infrastructure.auth.jwt_handler import JWTHandler


# Security scheme; missing credentials are reported as 401 below
security = HTTPBearer(auto_error=False)

# Global instances
jwt_handler = JWTHandler()


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> AuthenticatedUser:
    """
    FastAPI dependency to get the authenticated principal.

    Raises:
        HTTPException: If authentication fails
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        return jwt_handler.get_user(credentials.credentials)
    except ValidationError as e:
        raise _unauthorized(str(e))


async def get_current_user_id(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)]
) -> str:
    """FastAPI dependency to get current authenticated user ID."""
    return user.user_id
