"""
Shared test fixtures for the summarizer backend test suite.
"""

from datetime import UTC, datetime, timedelta

import pytest
import structlog
from fastapi.testclient import TestClient

from summarizer.config import AIConfig, EntitlementConfig


class MutableClock:
    """Deterministic clock helper for tests."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> None:
        self._now += delta


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Settings deterministic and offline for tests."""
    monkeypatch.setenv("AI__API_KEY", "test-ai-key")
    monkeypatch.setenv("SUPABASE_URL", "")
    monkeypatch.setenv("BILLING__WEBHOOK_SECRET", "")


@pytest.fixture(autouse=True)
def _configure_structlog_for_tests():
    """Configure structlog for tests using a simple, deterministic setup."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(datetime(2026, 1, 31, 12, 0, tzinfo=UTC))


@pytest.fixture
def ai_config() -> AIConfig:
    """AI config with no backoff so retry tests run instantly."""
    return AIConfig(
        endpoint="https://ai.test/summarize",
        api_key="test-ai-key",
        retry_backoff_seconds=0,
    )


@pytest.fixture
def entitlement_config() -> EntitlementConfig:
    return EntitlementConfig(
        subscription_check_url="https://backend.test/api/v1/billing/check-subscription",
        cache_ttl_seconds=300,
    )


@pytest.fixture
def client() -> TestClient:
    """FastAPI TestClient wrapping the main application."""
    # Clear the lru_cache so settings pick up test env vars
    from summarizer.config import get_settings

    get_settings.cache_clear()

    from summarizer.main import app

    return TestClient(app)
