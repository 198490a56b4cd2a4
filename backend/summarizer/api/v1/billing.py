"""Subscription backend endpoints: plan lookup and Stripe webhook."""

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from summarizer.errors import (
    SignatureError,
    StoreError,
    UnhandledEventError,
    ValidationError,
)
from summarizer.models.billing import Plan
from summarizer.services.subscription_store import SubscriptionStore
from summarizer.services.webhook_handler import WebhookHandler

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/billing", tags=["billing"])


class WebhookResponse(BaseModel):
    """Stripe webhook processing response."""

    received: bool
    processed: bool


def _get_subscription_store(request: Request) -> SubscriptionStore:
    store = getattr(request.app.state, "subscription_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Subscription store unavailable")
    return store


def _get_webhook_handler(request: Request) -> WebhookHandler:
    handler = getattr(request.app.state, "webhook_handler", None)
    if handler is None:
        raise HTTPException(status_code=503, detail="Stripe not configured")
    return handler


@router.get("/check-subscription")
async def check_subscription(
    request: Request,
    email: str | None = Query(default=None),
) -> JSONResponse:
    """Return the stored plan for an email; unknown or expired users are free."""
    if not email:
        return JSONResponse(status_code=400, content={"error": "Email is required"})

    store = _get_subscription_store(request)
    try:
        subscription = await store.get(email)
    except StoreError as e:
        logger.error("subscription_lookup_failed", email=email, error=str(e))
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    if subscription is None:
        return JSONResponse(content={"plan": Plan.FREE.value})

    if subscription.plan == Plan.PRO and subscription.is_expired(datetime.now(UTC)):
        logger.info("subscription_expired", email=email)
        subscription = subscription.model_copy(update={"plan": Plan.FREE})

    return JSONResponse(content=subscription.to_record())


@router.post("/webhook", response_model=WebhookResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
) -> WebhookResponse:
    """Verify a Stripe event and upgrade the payer on completed checkout."""
    handler = _get_webhook_handler(request)
    payload = await request.body()

    try:
        outcome = await handler.handle(payload, stripe_signature)
    except SignatureError as e:
        logger.warning("stripe_webhook_signature_invalid", error=str(e))
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}")
    except (UnhandledEventError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=e.user_message)
    except StoreError:
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return WebhookResponse(received=True, processed=outcome.processed)
