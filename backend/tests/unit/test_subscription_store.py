"""Unit tests for subscription stores."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest

from summarizer.errors import StoreError
from summarizer.models.billing import Plan
from summarizer.services.subscription_store import (
    InMemorySubscriptionStore,
    SupabaseSubscriptionStore,
)

EXPIRES = datetime(2026, 2, 28, 12, 0, tzinfo=UTC)


class FakeQuery:
    """Chainable stand-in for a Supabase table query."""

    def __init__(self, table: "FakeTable", op: str, payload=None):
        self.table = table
        self.op = op
        self.payload = payload
        self.filters: dict[str, str] = {}

    def select(self, *_args):
        return self

    def eq(self, column, value):
        self.filters[column] = value
        return self

    def limit(self, _n):
        return self

    async def execute(self):
        if self.table.fail:
            raise RuntimeError("connection reset")
        if self.op == "select":
            rows = [r for r in self.table.rows.values() if r["email"] == self.filters.get("email")]
            return SimpleNamespace(data=rows)
        self.table.rows[self.payload["email"]] = dict(self.payload)
        self.table.upserts.append(self.payload)
        return SimpleNamespace(data=[dict(self.payload)])


class FakeTable:
    def __init__(self):
        self.rows: dict[str, dict] = {}
        self.upserts: list[dict] = []
        self.fail = False

    def select(self, *_args):
        return FakeQuery(self, "select")

    def upsert(self, payload, on_conflict):
        assert on_conflict == "email"
        return FakeQuery(self, "upsert", payload)


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, FakeTable] = {}

    def table(self, name):
        return self.tables.setdefault(name, FakeTable())


class TestInMemorySubscriptionStore:
    async def test_get_missing_returns_none(self):
        store = InMemorySubscriptionStore()
        assert await store.get("nobody@x.com") is None

    async def test_set_then_get(self, clock):
        store = InMemorySubscriptionStore(now_provider=clock.now)

        await store.set("a@b.com", Plan.PRO, EXPIRES)
        record = await store.get("a@b.com")

        assert record.email == "a@b.com"
        assert record.plan == Plan.PRO
        assert record.expires_at == EXPIRES
        assert record.created_at == clock.now()

    async def test_overwrite_preserves_created_at(self, clock):
        store = InMemorySubscriptionStore(now_provider=clock.now)
        first_created = clock.now()

        await store.set("a@b.com", Plan.PRO, EXPIRES)
        clock.advance(timedelta(days=30))
        await store.set("a@b.com", Plan.PRO, EXPIRES + timedelta(days=30))
        record = await store.get("a@b.com")

        assert record.created_at == first_created
        assert record.expires_at == EXPIRES + timedelta(days=30)

    async def test_get_returns_copy(self):
        store = InMemorySubscriptionStore()
        await store.set("a@b.com", Plan.PRO, EXPIRES)

        record = await store.get("a@b.com")
        record.plan = Plan.FREE

        assert (await store.get("a@b.com")).plan == Plan.PRO


class TestSupabaseSubscriptionStore:
    async def test_writes_record_shape(self, clock):
        client = FakeSupabase()
        store = SupabaseSubscriptionStore(client, "subscriptions", now_provider=clock.now)

        await store.set("a@b.com", Plan.PRO, EXPIRES)

        row = client.tables["subscriptions"].upserts[0]
        assert row == {
            "email": "a@b.com",
            "plan": "pro",
            "expiresAt": "2026-02-28T12:00:00Z",
            "createdAt": "2026-01-31T12:00:00Z",
        }

    async def test_round_trip_and_created_at_preserved(self, clock):
        client = FakeSupabase()
        store = SupabaseSubscriptionStore(client, now_provider=clock.now)

        await store.set("a@b.com", Plan.PRO, EXPIRES)
        clock.advance(timedelta(days=3))
        await store.set("a@b.com", Plan.PRO, EXPIRES + timedelta(days=3))
        record = await store.get("a@b.com")

        assert record.plan == Plan.PRO
        assert record.created_at == datetime(2026, 1, 31, 12, 0, tzinfo=UTC)

    async def test_get_missing_returns_none(self):
        store = SupabaseSubscriptionStore(FakeSupabase())
        assert await store.get("nobody@x.com") is None

    async def test_failures_raise_store_error(self):
        client = FakeSupabase()
        client.table("subscriptions").fail = True
        store = SupabaseSubscriptionStore(client)

        with pytest.raises(StoreError):
            await store.get("a@b.com")
        with pytest.raises(StoreError):
            await store.set("a@b.com", Plan.PRO, EXPIRES)
