"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import SignInResult


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for Identity Store operations.

    The Identity Store owns credentials; this service only verifies
    them, exchanges passwords for them, and revokes them.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            AuthenticatedUser with user ID and basic info

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        """
        Exchange an email/password pair for an identity credential.

        Args:
            email: Account email (normalized by the caller)
            password: Account password

        Returns:
            SignInResult with the user and its access/refresh tokens

        Raises:
            InvalidCredentialsError: If the pair is rejected
            IdentityServiceError: If the Identity Store is unreachable
        """
        ...

    async def revoke(self, access_token: str, scope: str = "local") -> bool:
        """
        Revoke an identity credential.

        Best effort: failures are logged and reported as False.

        Args:
            access_token: The credential to revoke
            scope: "local" for this device only, "global" for every device

        Returns:
            True if the Identity Store accepted the revocation
        """
        ...
