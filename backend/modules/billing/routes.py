"""
Payment API endpoints.

Order creation and the checkout callback run behind the session check.
The webhook is unauthenticated: it is trusted only through its signature
and always answers 200.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from api.dependencies import get_billing_service
from api.middleware.access import require_session
from modules.access import AccessDecision
from shared.exceptions import StoreUnavailableError

from .exceptions import (
    GatewayError,
    GatewayNotConfiguredError,
    InvalidPlanError,
    PaymentNotFoundError,
    ReconciliationTransientError,
    SignatureInvalidError,
)
from .interfaces import IBillingService
from .models import (
    CreateOrderRequest,
    OrderResponse,
    PaymentSummary,
    ReconcileOutcome,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
    WebhookAck,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "x-razorpay-signature"


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": code, "message": message})


@router.post("/orders", response_model=OrderResponse)
async def create_order(
    request: CreateOrderRequest,
    access: AccessDecision = Depends(require_session),
    service: IBillingService = Depends(get_billing_service),
) -> OrderResponse:
    """
    Open a gateway order for a plan.

    Returns what the checkout widget needs to collect the payment.
    """
    try:
        return await service.create_order(access.user, request.plan)
    except InvalidPlanError as e:
        raise _error(400, e.code, "Unknown plan")
    except GatewayNotConfiguredError as e:
        raise _error(500, e.code, e.message)
    except GatewayError as e:
        raise _error(502, e.code, e.message)
    except StoreUnavailableError as e:
        raise _error(503, e.code, "Could not record the order, please try again")


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    request: VerifyPaymentRequest,
    access: AccessDecision = Depends(require_session),
    service: IBillingService = Depends(get_billing_service),
) -> VerifyPaymentResponse:
    """
    Checkout callback: verify the signature and activate the plan.

    Calling this again for an order that is already completed is a no-op.
    """
    try:
        result = await service.verify_client_payment(access.user, request)
    except SignatureInvalidError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": e.code, "verified": False, "message": "Payment verification failed"},
        )
    except PaymentNotFoundError as e:
        raise _error(404, e.code, "Payment not found")
    except ReconciliationTransientError as e:
        raise _error(503, e.code, e.message)
    except GatewayNotConfiguredError as e:
        raise _error(500, e.code, e.message)

    payment = result.payment
    message = (
        "Payment verified and subscription activated"
        if result.outcome == ReconcileOutcome.APPLIED
        else "Payment already verified"
    )
    return VerifyPaymentResponse(
        verified=True,
        message=message,
        payment=PaymentSummary(
            order_id=payment.razorpay_order_id,
            payment_id=payment.razorpay_payment_id,
            status=payment.status,
            plan=payment.plan,
            amount=payment.amount,
        ),
    )


@router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    service: IBillingService = Depends(get_billing_service),
) -> WebhookAck:
    """
    Gateway webhook.

    The body is read raw because the signature covers the exact bytes.
    """
    raw_body = await request.body()
    return await service.handle_webhook(raw_body, request.headers.get(SIGNATURE_HEADER))
