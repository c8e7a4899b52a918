"""
Plan arithmetic.

Durations are applied as calendar-day additions on aware UTC datetimes.
UTC has no DST shifts, so timedelta(days=n) lands on the same wall-clock
time n calendar days later.
"""

from datetime import datetime, timedelta
from typing import Optional

from .models import EntitlementChange, Plan, Subscription

PLAN_DURATION_DAYS: dict[Plan, int] = {
    Plan.ONE_MONTH: 30,
    Plan.SIX_MONTHS: 180,
    Plan.TWELVE_MONTHS: 365,
}


def plan_duration(plan: Plan) -> timedelta:
    """Length of entitlement bought by a plan."""
    return timedelta(days=PLAN_DURATION_DAYS[Plan(plan)])


def add_plan_duration(reference: datetime, plan: Plan) -> datetime:
    """Shift a reference instant forward by the plan's duration."""
    return reference + plan_duration(plan)


def compute_entitlement(
    current: Optional[Subscription],
    plan: Plan,
    now: datetime,
) -> EntitlementChange:
    """
    Decide how a newly captured payment changes the subscription.

    - No row: create, starting now.
    - Row that is not active at `now` (expired, cancelled, or past its
      end_date): replace, starting now.
    - Active row: extend from its current end_date, keeping start_date,
      so renewing early never loses remaining time.
    """
    plan = Plan(plan)

    if current is None:
        return EntitlementChange(
            action="create",
            plan=plan,
            start_date=now,
            end_date=add_plan_duration(now, plan),
        )

    if not current.is_active_at(now):
        return EntitlementChange(
            action="replace",
            plan=plan,
            start_date=now,
            end_date=add_plan_duration(now, plan),
        )

    return EntitlementChange(
        action="extend",
        plan=plan,
        start_date=current.start_date,
        end_date=add_plan_duration(current.end_date, plan),
    )
