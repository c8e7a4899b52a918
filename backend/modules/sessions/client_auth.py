"""
Outgoing-request session interceptor.

Client code calling the PivotDesk API must send both the identity
credential and the session token on every request. Rather than patching
a global HTTP function, pass a SessionTokenAuth to the httpx client:

    auth = SessionTokenAuth(access_token, session_token)
    with httpx.Client(base_url=api_url, auth=auth) as client:
        client.get("/api/subscription/details")
"""

from typing import Generator, Optional

import httpx

from .transport import SESSION_HEADER

# Deny reasons that end this device's login
FORCED_LOGOUT_CODES = frozenset({"session_mismatch", "profile_not_found"})


class SessionTokenAuth(httpx.Auth):
    """
    httpx auth flow attaching the bearer credential and session token.

    When the server answers a forced logout, both tokens are dropped so
    later requests go out anonymous instead of retrying a dead session.
    """

    requires_response_body = True

    def __init__(self, access_token: Optional[str], session_token: Optional[str]):
        self.access_token = access_token
        self.session_token = session_token

    def update(self, access_token: Optional[str] = None, session_token: Optional[str] = None) -> None:
        """Swap in new tokens, e.g. after a fresh login."""
        if access_token is not None:
            self.access_token = access_token
        if session_token is not None:
            self.session_token = session_token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.access_token:
            request.headers["Authorization"] = f"Bearer {self.access_token}"
        if self.session_token:
            request.headers[SESSION_HEADER] = self.session_token

        response = yield request

        if response.status_code == 401 and _error_code(response) in FORCED_LOGOUT_CODES:
            self.access_token = None
            self.session_token = None

    @property
    def signed_in(self) -> bool:
        return bool(self.access_token and self.session_token)


def _error_code(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("error") if isinstance(body, dict) else None
