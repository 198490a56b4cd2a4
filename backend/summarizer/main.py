"""
AI Summary Backend - Main FastAPI Application.

Hosts the extension's summarize pipeline behind a message endpoint and the
subscription backend (plan lookup + Stripe webhook).

Run with:
    uvicorn summarizer.main:app --reload
"""

from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from supabase import acreate_client

from summarizer.api.v1.billing import router as billing_router
from summarizer.api.v1.messages import router as messages_router
from summarizer.config import get_settings
from summarizer.constants import API_TITLE, API_VERSION
from summarizer.logging_config import setup_logging
from summarizer.middleware import RequestContextMiddleware
from summarizer.services.ai_client import AISummaryClient
from summarizer.services.entitlement_service import EntitlementService
from summarizer.services.message_router import MessageRouter
from summarizer.services.orchestrator import RequestOrchestrator
from summarizer.services.stripe_service import StripeService
from summarizer.services.subscription_store import (
    InMemorySubscriptionStore,
    SubscriptionStore,
    SupabaseSubscriptionStore,
)
from summarizer.services.webhook_handler import WebhookHandler

# Get settings before logging setup so we know the debug flag
settings = get_settings()

setup_logging(settings.debug)

logger = structlog.get_logger(__name__)


async def _build_subscription_store() -> SubscriptionStore:
    if settings.supabase_url and settings.supabase_secret_key:
        try:
            client = await acreate_client(settings.supabase_url, settings.supabase_secret_key)
            logger.info("supabase_configured")
            return SupabaseSubscriptionStore(client, settings.billing.subscriptions_table)
        except Exception as e:
            logger.warning("supabase_init_failed", error=str(e))
    else:
        logger.warning("supabase_not_configured", detail="Using in-memory subscription store")
    return InMemorySubscriptionStore()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler for startup and shutdown."""
    logger.info("api_startup", cors_origins=settings.cors_origins)

    if not settings.ai.api_key:
        logger.warning("ai_key_missing", detail="Summaries will fail until AI__API_KEY is set")

    store = await _build_subscription_store()

    webhook_handler: WebhookHandler | None = None
    if settings.billing.webhook_secret:
        stripe_service = StripeService(settings.billing)
        webhook_handler = WebhookHandler(stripe_service, store, settings.billing)
        logger.info("stripe_configured")
    else:
        logger.warning("stripe_not_configured", detail="Webhook endpoint will return 503")

    ai_client = AISummaryClient(settings.ai)
    entitlement_service = EntitlementService(settings.entitlement)
    orchestrator_factory = partial(RequestOrchestrator, ai_client, entitlement_service)

    _app.state.subscription_store = store
    _app.state.webhook_handler = webhook_handler
    _app.state.message_router = MessageRouter(
        entitlement_service,
        orchestrator_factory,
        checkout_url=settings.billing.checkout_url,
    )

    logger.info("services_initialized")

    yield

    await ai_client.close()
    await entitlement_service.close()
    logger.info("api_shutdown")


app = FastAPI(
    title=API_TITLE,
    description=(
        "Summaries and code explanations for text selected in the browser "
        "extension, gated by the user's subscription plan."
    ),
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Request context middleware must come before CORS so every response gets
# the X-Request-ID header (including preflight OPTIONS responses).
app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(billing_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}
