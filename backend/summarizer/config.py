"""
Application configuration using pydantic-settings.
Loads environment variables from .env file.

Nested config groups (AIConfig, EntitlementConfig, BillingConfig) are
env-overridable via the double-underscore delimiter, e.g.:
    AI__ENDPOINT=https://api.example.com/summarize
    ENTITLEMENT__CACHE_TTL_SECONDS=60
    BILLING__ACKNOWLEDGE_UNHANDLED_EVENTS=true
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AIConfig(BaseModel):
    """Outbound AI generation endpoint parameters."""

    endpoint: str = "https://api.example.com/summarize"
    api_key: str = ""
    max_tokens: int = 500
    timeout_seconds: float = 15.0
    max_retries: int = 1
    retry_backoff_seconds: float = 1.0


class EntitlementConfig(BaseModel):
    """Client-side plan lookup against the subscription-check route."""

    subscription_check_url: str = "http://localhost:8000/api/v1/billing/check-subscription"
    # Cached plans are re-fetched after this many seconds
    cache_ttl_seconds: float = 300.0
    request_timeout_seconds: float = 10.0


class BillingConfig(BaseModel):
    """Stripe webhook and subscription persistence settings."""

    stripe_secret_key: str = ""
    webhook_secret: str = ""
    subscription_months: int = 1
    checkout_url: str = "https://checkout.stripe.com/pay"
    # When False, unknown webhook event types get a 400
    acknowledge_unhandled_events: bool = False
    subscriptions_table: str = "subscriptions"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # Supabase
    supabase_url: str = ""
    supabase_secret_key: str = ""

    # App Settings
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    # Nested config groups (env-overridable via SECTION__KEY format)
    ai: AIConfig = Field(default_factory=AIConfig)
    entitlement: EntitlementConfig = Field(default_factory=EntitlementConfig)
    billing: BillingConfig = Field(default_factory=BillingConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
