"""
Client for the external AI generation endpoint.

A single POST carries the prompt; transient failures (5xx, timeouts,
connection errors) are retried with a fixed backoff up to the configured
budget. The response text is opaque to callers.

Usage:
    client = AISummaryClient(settings.ai)
    text = await client.generate(prompt)
"""

import asyncio

import httpx
import structlog

from summarizer.config import AIConfig
from summarizer.constants import RESPONSE_PLACEHOLDER
from summarizer.errors import RemoteError, TransportError

logger = structlog.get_logger(__name__)


class AISummaryClient:
    """Service for calling the AI generation endpoint."""

    def __init__(self, ai_config: AIConfig | None = None, client: httpx.AsyncClient | None = None):
        """
        Initialize the AI client.

        Args:
            ai_config: Endpoint, credentials, timeout and retry settings.
            client:    Optional pre-built httpx client (tests inject a MockTransport).
        """
        self.ai_config = ai_config or AIConfig()
        self._client = client or httpx.AsyncClient(timeout=self.ai_config.timeout_seconds)

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request_with_retry(self, payload: dict) -> httpx.Response:
        """
        POST to the AI endpoint with retry logic for transient failures.

        Makes at most ``max_retries + 1`` attempts, sleeping
        ``retry_backoff_seconds`` between them, on:
        - HTTP 5xx errors
        - Timeout errors
        - Transport (connection) errors

        Does NOT retry on 4xx errors or any other exception.

        Raises:
            RemoteError: On a 4xx, or a 5xx once retries are exhausted
            TransportError: If the last attempt timed out or failed to connect
        """
        max_attempts = self.ai_config.max_retries + 1
        last_error: RemoteError | TransportError | None = None

        for attempt in range(max_attempts):
            try:
                response = await self._client.post(
                    self.ai_config.endpoint,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.ai_config.api_key}"},
                )
            except httpx.TimeoutException as exc:
                last_error = TransportError(f"AI request timed out: {exc}")
            except httpx.TransportError as exc:
                last_error = TransportError(f"AI request failed: {exc}")
            else:
                if response.is_success:
                    return response
                if response.status_code < 500:
                    raise RemoteError(response.status_code)
                last_error = RemoteError(response.status_code)

            if attempt + 1 < max_attempts:
                logger.warning(
                    "ai_request_retry",
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    error=str(last_error),
                    delay_seconds=self.ai_config.retry_backoff_seconds,
                )
                await asyncio.sleep(self.ai_config.retry_backoff_seconds)

        raise last_error  # type: ignore[misc]

    async def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the generated text.

        Returns:
            The first non-empty string among the ``response`` and ``summary``
            fields of the JSON body, or a placeholder when there is none.
        """
        payload = {"prompt": prompt, "max_tokens": self.ai_config.max_tokens}
        response = await self._request_with_retry(payload)
        data = response.json()
        if not isinstance(data, dict):
            return RESPONSE_PLACEHOLDER
        for key in ("response", "summary"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
        return RESPONSE_PLACEHOLDER
