"""
Session repository for database access.

Encapsulates all Supabase queries for the two tables Session Guard owns:
- profiles (only the last_session_token column is written here,
  plus the row itself on first authentication)
- device_lock (unique on user_id)
"""

from typing import Any, Optional

from shared.repository import BaseRepository, utc_now
from .models import Profile


class SessionRepository(BaseRepository[Profile]):
    """
    Repository for profile session tokens and device locks.

    Note: This repository does NOT decide validity. Comparing tokens
    is the Session Guard's job.
    """

    # -------------------------------------------------------------------------
    # Profile operations
    # -------------------------------------------------------------------------

    def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        Get a profile by identity ID.

        Args:
            user_id: The identity UUID.

        Returns:
            Profile, or None if the identity has none yet.
        """
        result = self._execute(
            "profiles.get",
            self._db.table("profiles")
            .select("id, email, role, last_session_token, updated_at")
            .eq("id", user_id)
            .limit(1),
        )
        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    def store_profile_token(self, user_id: str, email: Optional[str], token: str) -> None:
        """
        Write the session token to the profile, creating the row if needed.

        Upsert keyed by id, so the first authentication materializes the
        profile. The role column is left to its database default.

        Args:
            user_id: The identity UUID.
            email: The identity's email.
            token: The new session token.
        """
        data: dict[str, Any] = {
            "id": user_id,
            "last_session_token": token,
            "updated_at": utc_now().isoformat(),
        }
        if email:
            data["email"] = email

        self._execute(
            "profiles.store_token",
            self._db.table("profiles").upsert(data, on_conflict="id"),
        )

    def clear_profile_token(self, user_id: str) -> None:
        """Null out the profile's session token. No-op when already null."""
        self._execute(
            "profiles.clear_token",
            self._db.table("profiles")
            .update({"last_session_token": None, "updated_at": utc_now().isoformat()})
            .eq("id", user_id),
        )

    # -------------------------------------------------------------------------
    # Device lock operations
    # -------------------------------------------------------------------------

    def upsert_device_lock(self, user_id: str, token: str) -> None:
        """Replace the identity's device lock with the new token."""
        self._execute(
            "device_lock.upsert",
            self._db.table("device_lock").upsert(
                {
                    "user_id": user_id,
                    "session_token": token,
                    "created_at": utc_now().isoformat(),
                },
                on_conflict="user_id",
            ),
        )

    def delete_device_lock(self, user_id: str) -> None:
        """Remove the identity's device lock. No-op when absent."""
        self._execute(
            "device_lock.delete",
            self._db.table("device_lock").delete().eq("user_id", user_id),
        )

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _map_to_profile(self, data: dict[str, Any]) -> Profile:
        """Map database row to Profile model."""
        return Profile(
            id=str(data["id"]),
            email=data.get("email"),
            role=data.get("role") or "user",
            last_session_token=data.get("last_session_token"),
            updated_at=data.get("updated_at"),
        )
