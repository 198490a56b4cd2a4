"""Unit tests for Stripe webhook processing."""

from datetime import UTC, datetime

import pytest

from summarizer.config import BillingConfig
from summarizer.errors import SignatureError, StoreError, UnhandledEventError, ValidationError
from summarizer.models.billing import Plan
from summarizer.services.subscription_store import InMemorySubscriptionStore
from summarizer.services.webhook_handler import WebhookHandler, add_months


class FakeStripeService:
    def __init__(self, event: dict):
        self.event = event

    def verify_webhook_event(self, _payload, signature):
        if signature != "valid":
            raise SignatureError("Webhook signature verification failed")
        return self.event


class FailingStore(InMemorySubscriptionStore):
    async def set(self, email, plan, expires_at):
        raise StoreError("write failed")


def _checkout_event(**session) -> dict:
    return {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {"object": session or {"customer_email": "a@b.com"}},
    }


def make_handler(event: dict, clock, store=None, config: BillingConfig | None = None):
    store = store or InMemorySubscriptionStore(now_provider=clock.now)
    handler = WebhookHandler(
        FakeStripeService(event),
        store,
        config or BillingConfig(webhook_secret="whsec_test"),
        now_provider=clock.now,
    )
    return handler, store


class TestAddMonths:
    def test_simple(self):
        assert add_months(datetime(2026, 3, 15, tzinfo=UTC), 1) == datetime(2026, 4, 15, tzinfo=UTC)

    def test_clamps_to_month_end(self):
        assert add_months(datetime(2026, 1, 31, tzinfo=UTC), 1) == datetime(2026, 2, 28, tzinfo=UTC)

    def test_leap_year(self):
        assert add_months(datetime(2028, 1, 31, tzinfo=UTC), 1) == datetime(2028, 2, 29, tzinfo=UTC)

    def test_rolls_over_year(self):
        assert add_months(datetime(2026, 12, 10, tzinfo=UTC), 1) == datetime(2027, 1, 10, tzinfo=UTC)


class TestWebhookHandler:
    async def test_checkout_completed_upgrades_to_pro(self, clock):
        handler, store = make_handler(_checkout_event(), clock)

        outcome = await handler.handle(b"{}", "valid")

        assert outcome.processed is True
        record = await store.get("a@b.com")
        assert record.email == "a@b.com"
        assert record.plan == Plan.PRO
        assert record.expires_at == datetime(2026, 2, 28, 12, 0, tzinfo=UTC)

    async def test_uses_customer_details_email(self, clock):
        event = _checkout_event(customer_details={"email": "c@d.com"})
        handler, store = make_handler(event, clock)

        await handler.handle(b"{}", "valid")

        assert (await store.get("c@d.com")).plan == Plan.PRO

    async def test_bad_signature_leaves_store_untouched(self, clock):
        handler, store = make_handler(_checkout_event(), clock)

        with pytest.raises(SignatureError):
            await handler.handle(b"{}", "tampered")

        assert store.records == {}

    async def test_unhandled_event_rejected_by_default(self, clock):
        event = {"id": "evt_2", "type": "invoice.paid", "data": {"object": {}}}
        handler, store = make_handler(event, clock)

        with pytest.raises(UnhandledEventError):
            await handler.handle(b"{}", "valid")

        assert store.records == {}

    async def test_unhandled_event_acknowledged_when_configured(self, clock):
        event = {"id": "evt_2", "type": "invoice.paid", "data": {"object": {}}}
        config = BillingConfig(webhook_secret="whsec_test", acknowledge_unhandled_events=True)
        handler, _ = make_handler(event, clock, config=config)

        outcome = await handler.handle(b"{}", "valid")

        assert outcome.processed is False
        assert outcome.event_type == "invoice.paid"

    async def test_missing_email_is_validation_error(self, clock):
        handler, store = make_handler(_checkout_event(customer="cus_1"), clock)

        with pytest.raises(ValidationError):
            await handler.handle(b"{}", "valid")

        assert store.records == {}

    async def test_store_failure_propagates(self, clock):
        handler, _ = make_handler(_checkout_event(), clock, store=FailingStore())

        with pytest.raises(StoreError):
            await handler.handle(b"{}", "valid")
