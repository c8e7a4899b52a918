"""
Subscription repository for database access.

The subscriptions table has a unique constraint on user_id, so there is
exactly one row per identity. All writes are either a plain insert
(the constraint arbitrates concurrent creators) or a compare-and-set
update guarded on the end_date the caller just read.
"""

from typing import Any, Optional

from shared.repository import BaseRepository, utc_now
from .models import EntitlementChange, Plan, Subscription, SubscriptionStatus


class SubscriptionRepository(BaseRepository[Subscription]):
    """Repository for subscription rows."""

    def get_by_user(self, user_id: str) -> Optional[Subscription]:
        """
        Get the identity's subscription row regardless of status.

        Args:
            user_id: The identity UUID.

        Returns:
            Subscription, or None if the identity never subscribed.
        """
        result = self._execute(
            "subscriptions.get_by_user",
            self._db.table("subscriptions").select("*").eq("user_id", user_id).limit(1),
        )
        if not result.data:
            return None
        return self._map_to_subscription(result.data[0])

    def insert(
        self,
        user_id: str,
        change: EntitlementChange,
        order_id: Optional[str] = None,
    ) -> Subscription:
        """
        Insert the identity's first subscription row.

        Args:
            user_id: The identity UUID.
            change: The computed change.
            order_id: Gateway order being credited, recorded on the row.

        Raises:
            APIError: With code 23505 when another writer created the row first.
        """
        now = utc_now().isoformat()
        data = {
            "user_id": user_id,
            "plan": change.plan.value,
            "start_date": change.start_date.isoformat(),
            "end_date": change.end_date.isoformat(),
            "status": SubscriptionStatus.ACTIVE.value,
            "applied_order_ids": [order_id] if order_id else [],
            "created_at": now,
            "updated_at": now,
        }
        result = self._execute(
            "subscriptions.insert",
            self._db.table("subscriptions").insert(data),
        )
        return self._map_to_subscription(result.data[0])

    def compare_and_set(
        self,
        current: Subscription,
        change: EntitlementChange,
        order_id: Optional[str] = None,
    ) -> Optional[Subscription]:
        """
        Apply a change only if the row still has the end_date we read.

        Args:
            current: The row as just read by this invocation.
            change: The computed change.
            order_id: Gateway order being credited, appended to the row.

        Returns:
            The updated row, or None if another writer got there first.
        """
        data = {
            "plan": change.plan.value,
            "start_date": change.start_date.isoformat(),
            "end_date": change.end_date.isoformat(),
            "status": SubscriptionStatus.ACTIVE.value,
            "applied_order_ids": current.applied_order_ids + ([order_id] if order_id else []),
            "updated_at": utc_now().isoformat(),
        }
        result = self._execute(
            "subscriptions.compare_and_set",
            self._db.table("subscriptions")
            .update(data)
            .eq("id", current.id)
            .eq("end_date", current.end_date.isoformat())
            .eq("status", current.status.value),
        )
        if not result.data:
            return None
        return self._map_to_subscription(result.data[0])

    def _map_to_subscription(self, data: dict[str, Any]) -> Subscription:
        """Map database row to Subscription model."""
        return Subscription(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            plan=Plan(data["plan"]),
            start_date=data["start_date"],
            end_date=data["end_date"],
            status=SubscriptionStatus(data["status"]),
            applied_order_ids=data.get("applied_order_ids") or [],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
