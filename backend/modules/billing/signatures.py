"""
Gateway signature verification.

Two schemes, both HMAC-SHA256 with hex digests:
- Webhooks sign the raw request body with the webhook secret.
- The checkout callback signs "<order_id>|<payment_id>" with the key secret.
Comparisons are constant-time and case-sensitive.
"""

import hashlib
import hmac
from typing import Optional


def _hmac_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def _matches(expected: str, presented: str) -> bool:
    # bytes, so non-ASCII input compares unequal instead of raising
    return hmac.compare_digest(expected.encode("utf-8"), presented.encode("utf-8"))


def webhook_signature(raw_body: bytes, secret: str) -> str:
    """Expected signature for a webhook body."""
    return _hmac_hex(secret, raw_body)


def payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Expected signature for a checkout callback."""
    return _hmac_hex(secret, f"{order_id}|{payment_id}".encode("utf-8"))


def verify_webhook_signature(raw_body: bytes, presented: Optional[str], secret: str) -> bool:
    """Whether the header signature matches the raw body."""
    if not presented or not secret:
        return False
    return _matches(webhook_signature(raw_body, secret), presented)


def verify_payment_signature(
    order_id: str,
    payment_id: str,
    presented: Optional[str],
    secret: str,
) -> bool:
    """Whether a checkout callback signature matches its order and payment ids."""
    if not presented or not secret:
        return False
    return _matches(payment_signature(order_id, payment_id, secret), presented)
