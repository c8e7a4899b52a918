"""
Authentication module.

Adapter over the Identity Store (Supabase Auth): JWT validation,
password sign-in and credential revocation.

Public API:
- IAuthService: Interface for auth operations
- SignInResult: Credential pair returned by a password sign-in
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import JWTPayload, SignInResult, LoginRequest
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidCredentialsError,
    IdentityServiceError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "JWTPayload",
    "SignInResult",
    "LoginRequest",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InvalidCredentialsError",
    "IdentityServiceError",
]
