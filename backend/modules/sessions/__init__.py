"""
Sessions module (Session Guard).

Single-active-device login enforcement, independent of the identity
credential's own lifecycle.

Public API:
- ISessionGuard: Interface for issue/validate/clear
- SessionValidation, SessionFailureReason: Validation outcome
- SessionTokenAuth: httpx interceptor for outgoing API calls
"""

from .interfaces import ISessionGuard
from .models import (
    SessionFailureReason,
    SessionValidation,
    Profile,
    DeviceLock,
)
from .client_auth import SessionTokenAuth

__all__ = [
    # Interface
    "ISessionGuard",
    # Models
    "SessionFailureReason",
    "SessionValidation",
    "Profile",
    "DeviceLock",
    # Client
    "SessionTokenAuth",
]
