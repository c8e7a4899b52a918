"""
User-related endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr

from modules.access import AccessDecision
from modules.subscriptions.interfaces import ISubscriptionService
from modules.subscriptions.models import Subscription
from shared.exceptions import StoreUnavailableError

from ..dependencies import get_subscription_service
from ..middleware.access import require_session

router = APIRouter()


class UserProfileResponse(BaseModel):
    """User profile response model."""

    id: str
    email: EmailStr
    role: str
    active_subscription: Optional[Subscription] = None


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_profile(
    access: AccessDecision = Depends(require_session),
    subscriptions: ISubscriptionService = Depends(get_subscription_service),
) -> UserProfileResponse:
    """
    Get the current user's profile.

    Requires the current session.
    """
    user = access.user
    try:
        subscription = await subscriptions.get_active_subscription(user.id)
    except StoreUnavailableError as e:
        raise HTTPException(
            status_code=503,
            detail={"error": e.code, "message": "Profile is unavailable right now"},
        )

    return UserProfileResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        active_subscription=subscription,
    )
