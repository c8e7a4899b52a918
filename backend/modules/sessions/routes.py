"""
Session API endpoints.

Login, session issue and logout. Every successful login makes the new
device the only one holding a valid session token.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from api.dependencies import get_auth_service, get_session_guard
from api.middleware.auth import get_bearer_token, get_current_user, get_optional_user
from modules.auth.exceptions import IdentityServiceError, InvalidCredentialsError
from modules.auth.interfaces import IAuthService
from modules.auth.models import LoginRequest
from shared.exceptions import StoreUnavailableError
from shared.models import AuthenticatedUser

from .interfaces import ISessionGuard
from .models import LoginResponse, LogoutResponse, SessionTokenResponse
from .transport import clear_session_cookie, read_session_token, set_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_unavailable() -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={"error": "STORE_UNAVAILABLE", "message": "Could not start a session, please try again"},
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    auth: IAuthService = Depends(get_auth_service),
    sessions: ISessionGuard = Depends(get_session_guard),
) -> LoginResponse:
    """
    Sign in with email and password.

    Any other device holding a session for this account is signed out
    on its next request.
    """
    try:
        result = await auth.sign_in_with_password(request.email, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail={"error": e.code, "message": e.message})
    except IdentityServiceError as e:
        raise HTTPException(status_code=503, detail={"error": e.code, "message": e.message})

    try:
        token = await sessions.issue_session(result.user)
    except StoreUnavailableError:
        # Do not leave a live credential without a session behind
        await auth.revoke(result.access_token, "local")
        raise _session_unavailable()

    set_session_cookie(response, token)
    return LoginResponse(
        user={"id": result.user.id, "email": result.user.email},
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        session_token=token,
    )


@router.post("/session", response_model=SessionTokenResponse)
async def start_session(
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
    sessions: ISessionGuard = Depends(get_session_guard),
) -> SessionTokenResponse:
    """
    Issue a session for an identity that signed in elsewhere.

    Used after OAuth and email-verification callbacks.
    """
    try:
        token = await sessions.issue_session(user)
    except StoreUnavailableError:
        raise _session_unavailable()

    set_session_cookie(response, token)
    return SessionTokenResponse(session_token=token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    request: Request,
    response: Response,
    token: Optional[str] = Depends(get_bearer_token),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    auth: IAuthService = Depends(get_auth_service),
    sessions: ISessionGuard = Depends(get_session_guard),
) -> LogoutResponse:
    """
    Sign out this device.

    Always succeeds; store and identity failures are only logged. The
    stored session is cleared only when this device still holds it, so a
    device that was already evicted cannot sign out its replacement.
    """
    if user is not None:
        try:
            validation = await sessions.validate_session(user, read_session_token(request))
            if validation.valid and not validation.first_session:
                await sessions.clear_session(user.id)
        except StoreUnavailableError as e:
            logger.warning(f"Could not clear session for user {user.id}: {e.message}")

    if token:
        await auth.revoke(token, "local")

    clear_session_cookie(response)
    return LogoutResponse()
