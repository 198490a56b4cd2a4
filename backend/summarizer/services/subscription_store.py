"""Subscription persistence keyed by email."""

from datetime import UTC, datetime
from typing import Protocol

import structlog

from summarizer.errors import StoreError
from summarizer.models.billing import Plan, Subscription

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SubscriptionStore(Protocol):
    """Storage contract for subscription records."""

    async def get(self, email: str) -> Subscription | None:
        """Fetch the record for an email, or None."""

    async def set(self, email: str, plan: Plan, expires_at: datetime) -> Subscription:
        """Upsert the record for an email.

        ``createdAt`` is stamped on the first write and preserved afterwards.
        """


class InMemorySubscriptionStore:
    """In-memory store used for tests and local fallback."""

    def __init__(self, now_provider=_utcnow) -> None:
        self.now_provider = now_provider
        self.records: dict[str, Subscription] = {}

    async def get(self, email: str) -> Subscription | None:
        record = self.records.get(email)
        return record.model_copy(deep=True) if record else None

    async def set(self, email: str, plan: Plan, expires_at: datetime) -> Subscription:
        existing = self.records.get(email)
        record = Subscription(
            email=email,
            plan=plan,
            expires_at=expires_at,
            created_at=existing.created_at if existing and existing.created_at else self.now_provider(),
        )
        self.records[email] = record
        return record.model_copy(deep=True)


class SupabaseSubscriptionStore:
    """Supabase-backed store: one row per email in the subscriptions table."""

    def __init__(self, client, table: str = "subscriptions", now_provider=_utcnow):
        self.client = client
        self.table = table
        self.now_provider = now_provider

    async def get(self, email: str) -> Subscription | None:
        try:
            response = (
                await self.client.table(self.table)
                .select("*")
                .eq("email", email)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Subscription lookup failed: {e}") from e

        rows = response.data or []
        if not rows:
            return None
        return Subscription.model_validate(rows[0])

    async def set(self, email: str, plan: Plan, expires_at: datetime) -> Subscription:
        existing = await self.get(email)
        record = Subscription(
            email=email,
            plan=plan,
            expires_at=expires_at,
            created_at=existing.created_at if existing and existing.created_at else self.now_provider(),
        )
        try:
            response = (
                await self.client.table(self.table)
                .upsert(record.to_record(), on_conflict="email")
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Subscription write failed: {e}") from e

        rows = response.data or []
        if not rows:
            # Some Supabase responses return no data unless `returning=representation`.
            return record
        return Subscription.model_validate(rows[0])
