"""
Access module data models.

Every protected request ends in exactly one terminal AccessState.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from shared.models import AuthenticatedUser
from modules.subscriptions.models import Subscription


class AccessState(str, Enum):
    """Terminal states of the per-request access state machine."""

    UNAUTHENTICATED = "unauthenticated"              # No verified identity
    SESSION_REJECTED = "session_rejected"            # Identity ok, session guard said no
    SUBSCRIPTION_MISSING = "subscription_missing"    # Session ok, gated route, no entitlement
    ALLOWED = "allowed"
    FAILED = "failed"                                # Store error; fail closed


class DenyReason(str, Enum):
    """Stable machine-readable reason codes returned to clients."""

    UNAUTHENTICATED = "unauthenticated"
    SESSION_MISMATCH = "session_mismatch"
    PROFILE_NOT_FOUND = "profile_not_found"
    SUBSCRIPTION_REQUIRED = "subscription_required"
    SERVER_ERROR = "server_error"


class AccessDecision(BaseModel):
    """Outcome of evaluating one request."""

    state: AccessState
    reason: Optional[DenyReason] = Field(None, description="Set when denied")
    user: Optional[AuthenticatedUser] = None
    subscription: Optional[Subscription] = None

    @property
    def allowed(self) -> bool:
        return self.state == AccessState.ALLOWED

    @property
    def forces_logout(self) -> bool:
        """Session rejections end the device's login; nothing else does."""
        return self.state == AccessState.SESSION_REJECTED
