"""
Subscription module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Plan(str, Enum):
    """Purchasable subscription plans."""

    ONE_MONTH = "1m"
    SIX_MONTHS = "6m"
    TWELVE_MONTHS = "12m"


class SubscriptionStatus(str, Enum):
    """Stored subscription lifecycle status."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class Subscription(BaseModel):
    """
    A subscription row. One row per identity.

    The stored status is not enough to grant access; see is_active_at().
    applied_order_ids makes crediting a purchase idempotent: it is written
    in the same statement as the new end_date.
    """

    id: str = Field(..., description="Subscription ID (UUID)")
    user_id: str = Field(..., description="Identity ID")
    plan: Plan = Field(..., description="Most recently purchased plan")
    start_date: datetime = Field(..., description="Start of the current entitlement")
    end_date: datetime = Field(..., description="End of the current entitlement")
    status: SubscriptionStatus = Field(..., description="Stored status")
    applied_order_ids: list[str] = Field(
        default_factory=list,
        description="Gateway orders already credited to this row",
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_active_at(self, now: datetime) -> bool:
        """Active means status=active AND end_date in the future."""
        return self.status == SubscriptionStatus.ACTIVE and self.end_date > now

    def has_applied(self, order_id: Optional[str]) -> bool:
        return bool(order_id) and order_id in self.applied_order_ids


class EntitlementChange(BaseModel):
    """The subscription write a captured payment should produce."""

    action: Literal["create", "replace", "extend"]
    plan: Plan
    start_date: datetime
    end_date: datetime


class SubscriptionDetails(BaseModel):
    """API response for the subscription-details endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    active: bool = Field(..., description="Recomputed from timestamps")
    subscription: Optional[Subscription] = Field(None, description="Active subscription")
    remaining_days: int = Field(
        default=0,
        serialization_alias="remainingDays",
        description="Whole days left, rounded up",
    )


class SubscriptionStatusResponse(BaseModel):
    """API response for the lenient status probe."""

    active: bool
