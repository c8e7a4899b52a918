"""
Session module data models.

A session token is this system's own single-device arbitrator. It is
independent of the identity credential, which may stay valid on
several devices at once.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SessionFailureReason(str, Enum):
    """Why a presented session token was not accepted."""

    NO_CREDENTIAL = "no_credential"          # No verified identity at all
    MISSING_TOKEN = "missing_token"          # Neither cookie nor header present
    TOKEN_MISMATCH = "token_mismatch"        # Another device logged in since
    PROFILE_NOT_FOUND = "profile_not_found"  # Identity has no profile row


class SessionValidation(BaseModel):
    """Result of validating a presented token against the stored one."""

    valid: bool = Field(..., description="Whether the request may proceed")
    reason: Optional[SessionFailureReason] = Field(
        None, description="Failure reason when not valid"
    )
    first_session: bool = Field(
        default=False,
        description="True when no token was stored yet (first login after signup/reset)",
    )

    @classmethod
    def ok(cls, first_session: bool = False) -> "SessionValidation":
        return cls(valid=True, first_session=first_session)

    @classmethod
    def fail(cls, reason: SessionFailureReason) -> "SessionValidation":
        return cls(valid=False, reason=reason)


class Profile(BaseModel):
    """User profile row. Session Guard owns last_session_token."""

    id: str = Field(..., description="Identity ID")
    email: Optional[str] = Field(None, description="Email address")
    role: str = Field(default="user", description="User role")
    last_session_token: Optional[str] = Field(None, description="Current session token")
    updated_at: Optional[datetime] = Field(None, description="Last update time")


class DeviceLock(BaseModel):
    """Denormalized mirror of the active session, one row per identity."""

    user_id: str = Field(..., description="Identity ID")
    session_token: str = Field(..., description="Current session token")
    created_at: datetime = Field(..., description="When this device took the lock")


class SessionTokenResponse(BaseModel):
    """API response carrying a freshly issued session token."""

    session_token: str


class LoginResponse(BaseModel):
    """API response for a password login."""

    user: dict
    access_token: str
    refresh_token: str
    session_token: str


class LogoutResponse(BaseModel):
    """API response for logout."""

    success: bool = True
