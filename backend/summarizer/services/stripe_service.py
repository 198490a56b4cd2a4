"""Stripe API wrapper."""

import stripe

from summarizer.config import BillingConfig
from summarizer.errors import SignatureError


class StripeService:
    """Encapsulates the Stripe SDK calls used by billing routes."""

    def __init__(self, config: BillingConfig) -> None:
        if not config.webhook_secret:
            raise ValueError("Stripe webhook secret is required")

        self.config = config
        if config.stripe_secret_key:
            stripe.api_key = config.stripe_secret_key

    def verify_webhook_event(self, payload: bytes, signature: str | None) -> dict:
        """
        Verify a webhook payload against the shared signing secret.

        Raises:
            SignatureError: Missing header, bad signature, or unparseable payload
        """
        if not signature:
            raise SignatureError("Missing Stripe-Signature header")

        try:
            event = stripe.Webhook.construct_event(
                payload=payload,
                sig_header=signature,
                secret=self.config.webhook_secret,
            )
        except (stripe.SignatureVerificationError, ValueError) as e:
            raise SignatureError(f"Webhook signature verification failed: {e}") from e
        return event.to_dict() if hasattr(event, "to_dict") else dict(event)
