"""
Access module.

Per-request gate for protected routes, composed from the Session Guard
and the subscription lookup. Fails closed.

Public API:
- AccessGuard: The state machine
- AccessDecision, AccessState, DenyReason: Its outcome
- AccessDeniedError: Raised by the API dependencies on deny
"""

from .service import AccessGuard
from .models import AccessDecision, AccessState, DenyReason
from .exceptions import AccessDeniedError

__all__ = [
    "AccessGuard",
    "AccessDecision",
    "AccessState",
    "DenyReason",
    "AccessDeniedError",
]
