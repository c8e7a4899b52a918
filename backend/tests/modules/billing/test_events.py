"""Tests for webhook event parsing."""

import json

import pytest

from modules.billing.events import parse_webhook_event
from modules.billing.exceptions import WebhookPayloadError
from modules.billing.models import OtherEvent, PaymentCapturedEvent


def captured(**entity_overrides) -> bytes:
    entity = {
        "id": "pay_1",
        "order_id": "ord_1",
        "amount": 1499900,
        "currency": "INR",
        "notes": {"user_id": "u1", "plan": "6m"},
    }
    entity.update(entity_overrides)
    return json.dumps({"event": "payment.captured", "payload": {"payment": {"entity": entity}}}).encode()


class TestParseWebhookEvent:
    def test_payment_captured(self):
        event = parse_webhook_event(captured())

        assert isinstance(event, PaymentCapturedEvent)
        assert event.payment.id == "pay_1"
        assert event.payment.order_id == "ord_1"
        assert event.payment.notes.user_id == "u1"
        assert event.payment.notes.plan == "6m"

    def test_notes_may_be_missing(self):
        body = json.dumps({
            "event": "payment.captured",
            "payload": {"payment": {"entity": {"id": "pay_1", "order_id": "ord_1"}}},
        }).encode()

        event = parse_webhook_event(body)

        assert event.payment.notes.user_id is None
        assert event.payment.notes.plan is None

    @pytest.mark.parametrize("notes", [[], None])
    def test_empty_notes_list(self, notes):
        event = parse_webhook_event(captured(notes=notes))

        assert isinstance(event, PaymentCapturedEvent)
        assert event.payment.notes.user_id is None
        assert event.payment.notes.plan is None

    def test_other_events_are_tagged_other(self):
        body = json.dumps({"event": "order.paid", "payload": {"order": {}}}).encode()

        event = parse_webhook_event(body)

        assert isinstance(event, OtherEvent)
        assert event.event == "order.paid"

    def test_not_json(self):
        with pytest.raises(WebhookPayloadError):
            parse_webhook_event(b"not json")

    def test_missing_event_name(self):
        with pytest.raises(WebhookPayloadError):
            parse_webhook_event(b'{"payload": {}}')

    def test_capture_without_order_id(self):
        with pytest.raises(WebhookPayloadError) as exc_info:
            parse_webhook_event(captured(order_id=""))

        assert "order_id" in exc_info.value.message
