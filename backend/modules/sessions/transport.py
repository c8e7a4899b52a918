"""
Session token transport.

The token travels as the session_token cookie and, for API calls made
from client code, as the x-session-token header. The cookie wins when
both are present.
"""

from typing import Optional

from fastapi import Request, Response

from shared.config import Settings, get_settings

SESSION_HEADER = "x-session-token"


def read_session_token(request: Request, settings: Optional[Settings] = None) -> Optional[str]:
    """Return the presented session token, preferring the cookie."""
    settings = settings or get_settings()
    cookie_token = request.cookies.get(settings.session_cookie_name)
    if cookie_token:
        return cookie_token
    return request.headers.get(SESSION_HEADER) or None


def set_session_cookie(response: Response, token: str, settings: Optional[Settings] = None) -> None:
    """Attach the session cookie (24h, path /)."""
    settings = settings or get_settings()
    cross_site = settings.session_cookie_cross_site
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_cookie_max_age,
        path="/",
        httponly=True,
        samesite="none" if cross_site else "lax",
        secure=cross_site,
    )


def clear_session_cookie(response: Response, settings: Optional[Settings] = None) -> None:
    """Expire the session cookie on the client."""
    settings = settings or get_settings()
    cross_site = settings.session_cookie_cross_site
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        samesite="none" if cross_site else "lax",
        secure=cross_site,
    )
