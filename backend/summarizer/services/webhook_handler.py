"""Stripe webhook processing: verified checkout events upgrade a user to pro."""

import calendar
from datetime import UTC, datetime

import structlog

from summarizer.config import BillingConfig
from summarizer.errors import StoreError, UnhandledEventError, ValidationError
from summarizer.models.billing import Plan, WebhookOutcome
from summarizer.services.stripe_service import StripeService
from summarizer.services.subscription_store import SubscriptionStore

logger = structlog.get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def add_months(moment: datetime, months: int) -> datetime:
    """Calendar-month addition; the day is clamped to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class WebhookHandler:
    """Verifies Stripe events and writes the resulting plan to the store."""

    def __init__(
        self,
        stripe_service: StripeService,
        store: SubscriptionStore,
        config: BillingConfig,
        now_provider=_utcnow,
    ) -> None:
        self.stripe_service = stripe_service
        self.store = store
        self.config = config
        self.now_provider = now_provider

    async def handle(self, payload: bytes, signature: str | None) -> WebhookOutcome:
        """
        Process one raw webhook delivery.

        Raises:
            SignatureError: Verification failed; the store is not touched
            ValidationError: Checkout event without a payer email
            UnhandledEventError: Unknown event type and acknowledgement is disabled
            StoreError: The subscription write failed
        """
        event = self.stripe_service.verify_webhook_event(payload, signature)
        event_type = str(event.get("type", ""))

        if event_type != CHECKOUT_COMPLETED:
            if self.config.acknowledge_unhandled_events:
                logger.info("stripe_webhook_ignored", event_type=event_type)
                return WebhookOutcome(event_type=event_type, processed=False)
            raise UnhandledEventError()

        session = event.get("data", {}).get("object", {}) or {}
        email = session.get("customer_email") or (session.get("customer_details") or {}).get("email")
        if not email:
            raise ValidationError("Checkout session has no customer email")

        expires_at = add_months(self.now_provider(), self.config.subscription_months)
        try:
            subscription = await self.store.set(email, Plan.PRO, expires_at)
        except StoreError:
            logger.error("subscription_update_failed", email=email, event_type=event_type)
            raise
        except Exception as e:
            logger.error("subscription_update_failed", email=email, error=str(e))
            raise StoreError(str(e)) from e

        logger.info(
            "stripe_webhook_processed",
            event_id=event.get("id"),
            event_type=event_type,
            email=email,
            expires_at=expires_at.isoformat(),
        )
        return WebhookOutcome(event_type=event_type, processed=True, subscription=subscription)
