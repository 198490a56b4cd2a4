"""Subscription and entitlement models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from summarizer.models.summary import SummaryType


class Plan(str, Enum):
    """Supported subscription plans."""

    FREE = "free"
    PRO = "pro"


class ResolutionSource(str, Enum):
    """Where a resolved plan came from."""

    CACHE = "cache"
    REMOTE = "remote"
    FALLBACK = "fallback"


class Subscription(BaseModel):
    """Persisted subscription record, one per email.

    Serialized with camelCase keys (``expiresAt``, ``createdAt``) to match the
    stored document shape and the subscription-check response.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    plan: Plan = Plan.FREE
    expires_at: datetime | None = Field(default=None, alias="expiresAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def to_record(self) -> dict:
        """Document shape: ISO-8601 timestamps, camelCase keys, no nulls."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Limits(BaseModel):
    """Feature limits derived from a plan. ``max_summaries=None`` means unbounded."""

    model_config = ConfigDict(frozen=True)

    max_summaries: int | None
    allowed_types: frozenset[SummaryType]
    allow_code_explanation: bool


class PlanResolution(BaseModel):
    """Outcome of a plan lookup.

    ``source == FALLBACK`` means the lookup failed and the free plan was
    substituted, as opposed to a confirmed free plan from the backend.
    """

    subscription: Subscription
    source: ResolutionSource

    @property
    def degraded(self) -> bool:
        return self.source == ResolutionSource.FALLBACK


class WebhookOutcome(BaseModel):
    """Result of processing one Stripe webhook event."""

    event_type: str
    processed: bool
    subscription: Subscription | None = None
