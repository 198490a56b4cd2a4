"""Plan resolution and feature limits for the summary pipeline."""

from datetime import UTC, datetime, timedelta

import httpx
import structlog

from summarizer.config import EntitlementConfig
from summarizer.constants import FREE_MAX_SUMMARIES
from summarizer.models.billing import (
    Limits,
    Plan,
    PlanResolution,
    ResolutionSource,
    Subscription,
)
from summarizer.models.summary import SummaryType

logger = structlog.get_logger(__name__)

FREE_LIMITS = Limits(
    max_summaries=FREE_MAX_SUMMARIES,
    allowed_types=frozenset({SummaryType.SHORT}),
    allow_code_explanation=False,
)

PRO_LIMITS = Limits(
    max_summaries=None,
    allowed_types=frozenset(SummaryType),
    allow_code_explanation=True,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def compute_limits(subscription: Subscription) -> Limits:
    """Map a plan to its limits. Pure; anything but pro gets free limits."""
    if subscription.plan == Plan.PRO:
        return PRO_LIMITS
    return FREE_LIMITS


class EntitlementService:
    """Resolves a user's plan from a local cache, falling back to the backend.

    Lookup failures never propagate: they degrade to the free plan with
    ``ResolutionSource.FALLBACK`` and are not cached, so the next call retries.
    """

    def __init__(
        self,
        config: EntitlementConfig | None = None,
        client: httpx.AsyncClient | None = None,
        now_provider=_utcnow,
    ) -> None:
        self.config = config or EntitlementConfig()
        self.now_provider = now_provider
        self._client = client or httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
        self._cache: dict[str, tuple[Subscription, datetime]] = {}

    async def close(self) -> None:
        await self._client.aclose()

    def _cached(self, email: str) -> Subscription | None:
        entry = self._cache.get(email)
        if entry is None:
            return None
        subscription, cached_at = entry
        if self.now_provider() - cached_at >= timedelta(seconds=self.config.cache_ttl_seconds):
            del self._cache[email]
            return None
        return subscription

    def invalidate(self, email: str) -> None:
        """Drop a cached plan, e.g. after the user starts an upgrade."""
        self._cache.pop(email, None)

    async def _fetch(self, email: str) -> Subscription:
        response = await self._client.get(
            self.config.subscription_check_url, params={"email": email}
        )
        response.raise_for_status()
        return Subscription.model_validate(response.json())

    async def resolve_plan(self, email: str | None) -> PlanResolution:
        if not email:
            logger.info("entitlement_email_missing")
            return PlanResolution(subscription=Subscription(), source=ResolutionSource.FALLBACK)

        cached = self._cached(email)
        if cached is not None:
            return PlanResolution(subscription=cached, source=ResolutionSource.CACHE)

        try:
            subscription = await self._fetch(email)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "entitlement_lookup_failed",
                email=email,
                error=str(e),
            )
            return PlanResolution(
                subscription=Subscription(email=email),
                source=ResolutionSource.FALLBACK,
            )

        self._cache[email] = (subscription, self.now_provider())
        logger.info("entitlement_resolved", email=email, plan=subscription.plan.value)
        return PlanResolution(subscription=subscription, source=ResolutionSource.REMOTE)
