"""
JWT Authentication middleware.

Extracts the bearer credential and resolves it to a verified identity
through the auth service.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.interfaces import IAuthService
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, code: str, message: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": code, "message": message},
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Raw bearer credential, or None."""
    if credentials is None:
        return None
    return credentials.credentials or None


async def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if token is None:
        raise AuthError("unauthenticated", "Missing authorization header")

    try:
        return await auth.validate_token(token)
    except AuthenticationError as e:
        raise AuthError("unauthenticated", e.message)


async def get_optional_user(
    token: Optional[str] = Depends(get_bearer_token),
    auth: IAuthService = Depends(get_auth_service),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Invalid or expired credentials resolve to None rather than an error,
    so the caller decides how to treat an anonymous request.
    """
    if token is None:
        return None

    try:
        return await auth.validate_token(token)
    except AuthenticationError:
        return None

