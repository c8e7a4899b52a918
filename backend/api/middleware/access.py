"""
Access middleware.

FastAPI dependencies that run the access state machine in front of
protected routes, and the handler that turns a denial into a response.

A session rejection is a forced logout: the requesting device's identity
credential is revoked and its session cookie deleted. The stored session
token is left alone, since it belongs to whichever device logged in last.
"""

import logging
from typing import Optional

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse

from modules.access import AccessDecision, AccessDeniedError, AccessGuard, DenyReason
from modules.auth.interfaces import IAuthService
from modules.sessions.transport import clear_session_cookie, read_session_token
from shared.models import AuthenticatedUser

from ..dependencies import get_access_guard, get_auth_service
from .auth import get_bearer_token, get_optional_user

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    DenyReason.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    DenyReason.SESSION_MISMATCH: status.HTTP_401_UNAUTHORIZED,
    DenyReason.PROFILE_NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    DenyReason.SUBSCRIPTION_REQUIRED: status.HTTP_403_FORBIDDEN,
    DenyReason.SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_REDIRECTS = {
    DenyReason.UNAUTHENTICATED: "/login",
    DenyReason.SESSION_MISMATCH: "/login",
    DenyReason.PROFILE_NOT_FOUND: "/login",
    DenyReason.SUBSCRIPTION_REQUIRED: "/subscribe",
}


async def _enforce(
    request: Request,
    token: Optional[str],
    user: Optional[AuthenticatedUser],
    guard: AccessGuard,
    auth: IAuthService,
    require_subscription: bool,
) -> AccessDecision:
    decision = await guard.evaluate(
        user,
        read_session_token(request),
        require_subscription=require_subscription,
    )
    if decision.allowed:
        return decision

    if decision.forces_logout and token:
        revoked = await auth.revoke(token, "local")
        logger.info(
            f"Forced logout for user {user.id if user else '-'} "
            f"({decision.reason.value}); credential revoked={revoked}"
        )

    raise AccessDeniedError(decision)


async def require_session(
    request: Request,
    token: Optional[str] = Depends(get_bearer_token),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    guard: AccessGuard = Depends(get_access_guard),
    auth: IAuthService = Depends(get_auth_service),
) -> AccessDecision:
    """
    Require a verified identity holding the current session.

    Usage:
        @router.get("/me")
        async def me(access: AccessDecision = Depends(require_session)):
            return {"user_id": access.user.id}
    """
    return await _enforce(request, token, user, guard, auth, require_subscription=False)


async def require_subscription(
    request: Request,
    token: Optional[str] = Depends(get_bearer_token),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    guard: AccessGuard = Depends(get_access_guard),
    auth: IAuthService = Depends(get_auth_service),
) -> AccessDecision:
    """Require the current session plus an active subscription."""
    return await _enforce(request, token, user, guard, auth, require_subscription=True)


async def access_denied_handler(request: Request, exc: AccessDeniedError) -> JSONResponse:
    """Render a denial with a stable reason code and where to send the user."""
    reason = exc.decision.reason or DenyReason.SERVER_ERROR
    content = {"error": reason.value, "message": exc.message}
    redirect = _REDIRECTS.get(reason)
    if redirect:
        content["redirect"] = f"{redirect}?reason={reason.value}"

    response = JSONResponse(status_code=_STATUS_CODES[reason], content=content)
    if exc.decision.forces_logout:
        clear_session_cookie(response)
    return response
