"""
Webhook event parsing.

Gateway payloads are validated at the boundary into a tagged variant
before any field is read: PaymentCapturedEvent or OtherEvent.
"""

import json

from pydantic import ValidationError as PydanticValidationError

from .exceptions import WebhookPayloadError
from .models import OtherEvent, PaymentCapturedEvent, WebhookEvent

PAYMENT_CAPTURED = "payment.captured"


def parse_webhook_event(raw_body: bytes) -> WebhookEvent:
    """
    Parse a raw webhook body.

    Args:
        raw_body: The exact bytes the signature was computed over.

    Returns:
        PaymentCapturedEvent for captures, OtherEvent for anything else.

    Raises:
        WebhookPayloadError: If the body is not JSON, has no event name,
            or is a capture missing its payment entity fields.
    """
    try:
        data = json.loads(raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise WebhookPayloadError(f"body is not JSON ({e.__class__.__name__})")

    if not isinstance(data, dict) or not isinstance(data.get("event"), str):
        raise WebhookPayloadError("missing event name")

    try:
        if data["event"] == PAYMENT_CAPTURED:
            return PaymentCapturedEvent.model_validate(data)
        return OtherEvent.model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise WebhookPayloadError(f"invalid fields: {fields}")
