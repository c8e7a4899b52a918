"""
Subscription API endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_subscription_service
from api.middleware.access import require_session
from api.middleware.auth import get_optional_user
from modules.access import AccessDecision
from shared.exceptions import StoreUnavailableError
from shared.models import AuthenticatedUser

from .interfaces import ISubscriptionService
from .models import SubscriptionDetails, SubscriptionStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/details", response_model=SubscriptionDetails)
async def get_subscription_details(
    access: AccessDecision = Depends(require_session),
    service: ISubscriptionService = Depends(get_subscription_service),
) -> SubscriptionDetails:
    """
    Get the caller's subscription with whole days remaining.

    An expired subscription is reported as inactive regardless of its
    stored status.
    """
    try:
        return await service.get_details(access.user.id)
    except StoreUnavailableError as e:
        raise HTTPException(
            status_code=503,
            detail={"error": e.code, "message": "Subscription details are unavailable right now"},
        )


@router.get("/status", response_model=SubscriptionStatusResponse)
async def get_subscription_status(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: ISubscriptionService = Depends(get_subscription_service),
) -> SubscriptionStatusResponse:
    """Lenient probe: any failure reads as inactive."""
    if user is None:
        return SubscriptionStatusResponse(active=False)

    try:
        subscription = await service.get_active_subscription(user.id)
    except StoreUnavailableError as e:
        logger.warning(f"Status probe failed for user {user.id}: {e.message}")
        return SubscriptionStatusResponse(active=False)

    return SubscriptionStatusResponse(active=subscription is not None)
