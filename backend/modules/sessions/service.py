"""
Session Guard implementation.

Enforces at most one logged-in device per identity by keeping a
single current session token on the profile (source of truth) and
mirroring it into device_lock.
"""

import logging
import secrets
from typing import Optional

from shared.exceptions import StoreUnavailableError
from shared.models import AuthenticatedUser

from .interfaces import ISessionGuard
from .models import SessionFailureReason, SessionValidation
from .repository import SessionRepository

logger = logging.getLogger(__name__)

# 32 random bytes, 256 bits of entropy
TOKEN_BYTES = 32


def generate_session_token() -> str:
    """Return a fresh URL-safe opaque session token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def token_hint(token: Optional[str]) -> str:
    """Loggable prefix of a token; never log the whole value."""
    if not token:
        return "<none>"
    return f"{token[:8]}..."


class SessionGuard(ISessionGuard):
    """
    Session Guard backed by the profiles and device_lock tables.

    Concurrent logins from two devices race on the profile upsert; the
    last writer wins and the other device fails its next validation.
    """

    def __init__(self, repository: SessionRepository):
        self._repo = repository

    async def issue_session(self, user: AuthenticatedUser) -> str:
        token = generate_session_token()

        # Profile is authoritative; a failure here fails the login
        self._repo.store_profile_token(user.id, user.email, token)

        try:
            self._repo.upsert_device_lock(user.id, token)
        except StoreUnavailableError as e:
            logger.warning(
                f"Device lock mirror update failed for user {user.id}: {e.message}"
            )

        logger.info(f"Issued session {token_hint(token)} for user {user.id}")
        return token

    async def validate_session(
        self,
        user: Optional[AuthenticatedUser],
        presented_token: Optional[str],
    ) -> SessionValidation:
        if user is None:
            return SessionValidation.fail(SessionFailureReason.NO_CREDENTIAL)

        profile = self._repo.get_profile(user.id)
        if profile is None:
            logger.warning(f"No profile for authenticated user {user.id}")
            return SessionValidation.fail(SessionFailureReason.PROFILE_NOT_FOUND)

        stored = profile.last_session_token
        if stored is None:
            # First login after signup/reset: nothing to compare against
            return SessionValidation.ok(first_session=True)

        if not presented_token:
            logger.info(f"No session token presented for user {user.id}")
            return SessionValidation.fail(SessionFailureReason.MISSING_TOKEN)

        if not secrets.compare_digest(stored.encode("utf-8"), presented_token.encode("utf-8")):
            logger.info(
                f"Session token mismatch for user {user.id}: "
                f"presented {token_hint(presented_token)}, current {token_hint(stored)}"
            )
            return SessionValidation.fail(SessionFailureReason.TOKEN_MISMATCH)

        return SessionValidation.ok()

    async def clear_session(self, user_id: str) -> None:
        self._repo.clear_profile_token(user_id)

        try:
            self._repo.delete_device_lock(user_id)
        except StoreUnavailableError as e:
            logger.warning(f"Device lock removal failed for user {user_id}: {e.message}")

        logger.info(f"Cleared session for user {user_id}")
