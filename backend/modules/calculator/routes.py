"""
Calculator API endpoints.

The calculator is the paid feature: every call needs the current
session and an active subscription.
"""

from fastapi import APIRouter, Depends

from api.middleware.access import require_subscription
from modules.access import AccessDecision

from .models import PivotRequest, PivotResponse
from .pivots import calculate

router = APIRouter()


@router.post("/pivots", response_model=PivotResponse, response_model_exclude_none=True)
async def calculate_pivots(
    request: PivotRequest,
    access: AccessDecision = Depends(require_subscription),
) -> PivotResponse:
    """Compute classic and/or Camarilla pivot levels from OHLC prices."""
    return calculate(request)
