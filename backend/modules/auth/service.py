"""
Authentication service implementation.

Validates Supabase JWT tokens, exchanges passwords for credentials
and revokes credentials. This is the only code that talks to the
Identity Store.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
import jwt
from supabase import AuthApiError, AuthError, Client

from shared.config import get_settings
from shared.database import get_supabase_client, get_supabase_anon_client
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import JWTPayload, SignInResult
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidCredentialsError,
    IdentityServiceError,
)

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Uses Supabase JWT tokens for authentication. The service-role
    client is only needed for revocation, so it is created lazily.
    """

    def __init__(self):
        self._settings = get_settings()
        self._db: Optional[Client] = None

    def _admin_client(self) -> Client:
        if self._db is None:
            self._db = get_supabase_client()
        return self._db

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        This implementation validates Supabase JWTs using the JWT secret.
        """
        if not token:
            raise MissingTokenError()

        if not self._settings.supabase_jwt_secret:
            raise InvalidTokenError("Server authentication not configured")

        try:
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
            jwt_payload = JWTPayload(**payload)
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))

        if not jwt_payload.email:
            raise InvalidTokenError("Token carries no email claim")

        return AuthenticatedUser(
            id=jwt_payload.sub,
            email=jwt_payload.email,
            email_verified=jwt_payload.email_confirmed_at is not None,
            last_sign_in=datetime.fromtimestamp(jwt_payload.iat, tz=timezone.utc),
            role=jwt_payload.role if jwt_payload.role != "authenticated" else "user",
        )

    async def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        """Sign in through a fresh anon client and return the new credential."""
        client = get_supabase_anon_client()
        try:
            response = client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as e:
            if e.status and 400 <= e.status < 500:
                raise InvalidCredentialsError()
            logger.error(f"Identity store rejected sign-in with status {e.status}: {e.message}")
            raise IdentityServiceError("sign_in") from e
        except AuthError as e:
            logger.error(f"Identity store sign-in failed: {e}")
            raise IdentityServiceError("sign_in") from e

        if response.user is None or response.session is None:
            raise InvalidCredentialsError()

        user = AuthenticatedUser(
            id=response.user.id,
            email=response.user.email or email,
            email_verified=response.user.email_confirmed_at is not None,
            last_sign_in=response.user.last_sign_in_at,
        )
        return SignInResult(
            user=user,
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
        )

    async def revoke(self, access_token: str, scope: str = "local") -> bool:
        """Sign the credential out; never raises."""
        if not access_token:
            return False
        try:
            self._admin_client().auth.admin.sign_out(access_token, scope)
            return True
        except (AuthError, RuntimeError) as e:
            logger.warning(f"Credential revocation failed: {e}")
            return False


# Module-level instance getter
_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    _service_instance = None
