"""
Access guard implementation.

Composes the Session Guard and the subscription lookup into the
per-request state machine for protected routes:

    no identity                      -> UNAUTHENTICATED
    session guard rejects            -> SESSION_REJECTED
    gated route, no active sub       -> SUBSCRIPTION_MISSING
    otherwise                        -> ALLOWED

Any store error along the way ends in FAILED (deny). The guard only
reads; forced logouts are carried out by the caller.
"""

import logging
from typing import Optional

from shared.models import AuthenticatedUser
from modules.sessions.interfaces import ISessionGuard
from modules.sessions.models import SessionFailureReason
from modules.subscriptions.interfaces import ISubscriptionService

from .models import AccessDecision, AccessState, DenyReason

logger = logging.getLogger(__name__)


class AccessGuard:
    """Per-request authorization for protected routes."""

    def __init__(self, sessions: ISessionGuard, subscriptions: ISubscriptionService):
        self._sessions = sessions
        self._subscriptions = subscriptions

    async def evaluate(
        self,
        user: Optional[AuthenticatedUser],
        presented_token: Optional[str],
        require_subscription: bool = False,
    ) -> AccessDecision:
        """
        Decide whether a request may proceed.

        Args:
            user: Verified identity, or None.
            presented_token: Session token from cookie or header.
            require_subscription: Whether the route is gated.

        Returns:
            AccessDecision in one of the terminal states.
        """
        if user is None:
            return AccessDecision(
                state=AccessState.UNAUTHENTICATED,
                reason=DenyReason.UNAUTHENTICATED,
            )

        try:
            validation = await self._sessions.validate_session(user, presented_token)
        except Exception:
            logger.exception(f"Session lookup failed for user {user.id}; denying")
            return self._fail(user)

        if not validation.valid:
            reason = (
                DenyReason.PROFILE_NOT_FOUND
                if validation.reason == SessionFailureReason.PROFILE_NOT_FOUND
                else DenyReason.SESSION_MISMATCH
            )
            return AccessDecision(state=AccessState.SESSION_REJECTED, reason=reason, user=user)

        if not require_subscription:
            return AccessDecision(state=AccessState.ALLOWED, user=user)

        try:
            subscription = await self._subscriptions.get_active_subscription(user.id)
        except Exception:
            logger.exception(f"Subscription lookup failed for user {user.id}; denying")
            return self._fail(user)

        if subscription is None:
            return AccessDecision(
                state=AccessState.SUBSCRIPTION_MISSING,
                reason=DenyReason.SUBSCRIPTION_REQUIRED,
                user=user,
            )

        return AccessDecision(state=AccessState.ALLOWED, user=user, subscription=subscription)

    @staticmethod
    def _fail(user: AuthenticatedUser) -> AccessDecision:
        return AccessDecision(state=AccessState.FAILED, reason=DenyReason.SERVER_ERROR, user=user)
