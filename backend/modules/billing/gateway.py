"""
Razorpay gateway client.

Only order creation goes through the gateway API. Captures arrive via
webhook or the checkout callback and never require an outbound call.
"""

import logging
import time
from typing import Any, Optional

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError as RazorpayGatewayError, ServerError

from .exceptions import GatewayError, GatewayNotConfiguredError

logger = logging.getLogger(__name__)


class RazorpayGateway:
    """Thin wrapper over razorpay.Client with bounded timeouts."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        timeout_seconds: int = 10,
        client: Optional[razorpay.Client] = None,
    ):
        self.key_id = key_id
        self._key_secret = key_secret
        self._timeout = timeout_seconds
        self._client = client

    def _get_client(self) -> razorpay.Client:
        if not self.key_id:
            raise GatewayNotConfiguredError("razorpay_key_id")
        if not self._key_secret:
            raise GatewayNotConfiguredError("razorpay_key_secret")
        if self._client is None:
            self._client = razorpay.Client(auth=(self.key_id, self._key_secret))
        return self._client

    def create_order(
        self,
        amount_minor: int,
        currency: str,
        notes: dict[str, str],
    ) -> dict[str, Any]:
        """
        Open an order on the gateway.

        Args:
            amount_minor: Amount in the smallest currency unit (paise).
            currency: ISO currency code.
            notes: Key/value notes echoed back on the captured payment.

        Returns:
            The gateway's order object (has id, amount, currency).

        Raises:
            GatewayNotConfiguredError: If credentials are missing.
            GatewayError: If the gateway rejects or cannot be reached.
        """
        client = self._get_client()
        data = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": f"receipt_{int(time.time() * 1000)}",
            "notes": notes,
        }
        try:
            return client.order.create(data=data, timeout=self._timeout)
        except BadRequestError as e:
            logger.error(f"Gateway rejected order: {e}")
            raise GatewayError("Payment gateway rejected the order", str(e))
        except (RazorpayGatewayError, ServerError) as e:
            logger.error(f"Gateway failed creating order: {e}")
            raise GatewayError("Payment gateway is unavailable", str(e))
        except requests.RequestException as e:
            logger.error(f"Gateway unreachable: {e!r}")
            raise GatewayError("Payment gateway is unreachable", type(e).__name__)
