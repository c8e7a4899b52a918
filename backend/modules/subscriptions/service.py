"""
Subscription service implementation.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from postgrest.exceptions import APIError

from shared.repository import is_unique_violation, utc_now

from .exceptions import SubscriptionConflictError
from .interfaces import ISubscriptionService
from .models import Plan, Subscription, SubscriptionDetails
from .plans import compute_entitlement
from .repository import SubscriptionRepository

logger = logging.getLogger(__name__)


def remaining_days(subscription: Optional[Subscription], now: datetime) -> int:
    """Whole days until end_date, rounded up; 0 when not active."""
    if subscription is None or not subscription.is_active_at(now):
        return 0
    return math.ceil((subscription.end_date - now) / timedelta(days=1))


class SubscriptionService(ISubscriptionService):
    """
    Subscription service backed by the subscriptions table.

    apply_plan() re-reads the row on every attempt, so the new end_date
    is always computed from a value read inside this invocation.
    """

    def __init__(self, repository: SubscriptionRepository, max_attempts: int = 3):
        self._repo = repository
        self._max_attempts = max(1, max_attempts)

    async def get_active_subscription(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[Subscription]:
        now = now or utc_now()
        subscription = self._repo.get_by_user(user_id)
        if subscription is None or not subscription.is_active_at(now):
            return None
        return subscription

    async def get_details(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> SubscriptionDetails:
        now = now or utc_now()
        subscription = await self.get_active_subscription(user_id, now)
        return SubscriptionDetails(
            active=subscription is not None,
            subscription=subscription,
            remaining_days=remaining_days(subscription, now),
        )

    async def apply_plan(
        self,
        user_id: str,
        plan: Plan,
        now: Optional[datetime] = None,
        order_id: Optional[str] = None,
    ) -> Subscription:
        now = now or utc_now()

        for attempt in range(1, self._max_attempts + 1):
            current = self._repo.get_by_user(user_id)
            if current is not None and current.has_applied(order_id):
                # An earlier attempt committed but its response was lost
                logger.info(f"Order {order_id} already credited to user {user_id}; no change")
                return current

            change = compute_entitlement(current, plan, now)

            if current is None:
                try:
                    updated = self._repo.insert(user_id, change, order_id)
                except APIError as e:
                    if not is_unique_violation(e):
                        raise
                    updated = None
            else:
                updated = self._repo.compare_and_set(current, change, order_id)

            if updated is not None:
                logger.info(
                    f"Subscription {change.action} for user {user_id}: "
                    f"plan={change.plan.value} end_date={change.end_date.isoformat()}"
                )
                return updated

            logger.info(
                f"Subscription for user {user_id} changed concurrently "
                f"(attempt {attempt}/{self._max_attempts}), re-reading"
            )

        raise SubscriptionConflictError(user_id, self._max_attempts)
