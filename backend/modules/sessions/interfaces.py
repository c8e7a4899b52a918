"""
Session module interface.

The access layer and the auth routes depend on ISessionGuard, not the
concrete implementation.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import SessionValidation


@runtime_checkable
class ISessionGuard(Protocol):
    """
    Interface for single-active-device session enforcement.

    At most one session token is current per identity. Issuing a new
    one silently evicts whichever device held the previous one.
    """

    async def issue_session(self, user: AuthenticatedUser) -> str:
        """
        Mint a new session token and make it the identity's current one.

        Args:
            user: The verified identity.

        Returns:
            The new opaque session token.

        Raises:
            StoreUnavailableError: If the profile write fails.
        """
        ...

    async def validate_session(
        self,
        user: Optional[AuthenticatedUser],
        presented_token: Optional[str],
    ) -> SessionValidation:
        """
        Check a presented token against the identity's current one.

        Args:
            user: The verified identity, or None when there is none.
            presented_token: Token from cookie or header, if any.

        Returns:
            SessionValidation; a null stored token validates as a
            first session.

        Raises:
            StoreUnavailableError: If the profile lookup fails.
        """
        ...

    async def clear_session(self, user_id: str) -> None:
        """
        Forget the identity's current session. Idempotent.

        Args:
            user_id: The identity UUID.
        """
        ...
