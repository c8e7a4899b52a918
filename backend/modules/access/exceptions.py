"""
Access module exceptions.
"""

from shared.exceptions import AuthorizationError

from .models import AccessDecision

_MESSAGES = {
    "unauthenticated": "Authentication required",
    "session_mismatch": "You have been signed out because your account was used on another device",
    "profile_not_found": "No profile exists for this account",
    "subscription_required": "An active subscription is required",
    "server_error": "Access could not be verified, please try again",
}


class AccessDeniedError(AuthorizationError):
    """
    Raised by the access dependencies when a request is denied.

    Carries the full decision so the handler can pick status code,
    redirect target and whether to drop the session cookie.
    """

    def __init__(self, decision: AccessDecision):
        reason = decision.reason.value if decision.reason else "server_error"
        super().__init__(_MESSAGES[reason], code=reason)
        self.decision = decision
