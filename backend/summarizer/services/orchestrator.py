"""
Request orchestrator for summarize actions.

One orchestrator instance serves one execution context and allows a single
AI request in flight at a time. A request arriving while another is in
flight is rejected, not queued.

Flow per request:
    validate -> in_flight -> resolve plan -> quota/plan checks -> sanitize
    -> detect code -> build prompt -> AI call -> record usage -> idle
"""

from enum import Enum
from typing import Any, Mapping

import pydantic
import structlog

from summarizer.constants import (
    MSG_CODE_NOT_ALLOWED,
    MSG_EMPTY_TEXT,
    MSG_INVALID_REQUEST,
    MSG_QUOTA_REACHED,
    MSG_TYPE_NOT_ALLOWED,
)
from summarizer.errors import (
    PlanRestrictionError,
    QuotaError,
    RequestInProgressError,
    SummarizationFailedError,
    ValidationError,
)
from summarizer.models.summary import SummaryRequest, SummaryResult
from summarizer.prompts.summary import build_prompt
from summarizer.services.ai_client import AISummaryClient
from summarizer.services.entitlement_service import EntitlementService, compute_limits
from summarizer.services.text_processing import is_code_snippet, sanitize_text
from summarizer.services.usage_tracker import UsageTracker

logger = structlog.get_logger(__name__)


class RequestState(str, Enum):
    """Lifecycle of the orchestrator's single request slot."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class RequestOrchestrator:
    """Gates, serializes and dispatches summarize requests."""

    def __init__(
        self,
        ai_client: AISummaryClient,
        entitlement_service: EntitlementService,
        usage_tracker: UsageTracker | None = None,
    ) -> None:
        self.ai_client = ai_client
        self.entitlement_service = entitlement_service
        self.usage_tracker = usage_tracker or UsageTracker()
        self._state = RequestState.IDLE

    @property
    def state(self) -> RequestState:
        return self._state

    def _acquire(self) -> None:
        if self._state is RequestState.IN_FLIGHT:
            raise RequestInProgressError()
        self._state = RequestState.IN_FLIGHT

    def _release(self) -> None:
        self._state = RequestState.IDLE

    @staticmethod
    def _validate(request: SummaryRequest | Mapping[str, Any]) -> SummaryRequest:
        if isinstance(request, SummaryRequest):
            return request
        try:
            return SummaryRequest.model_validate(request)
        except pydantic.ValidationError as e:
            raise ValidationError(MSG_INVALID_REQUEST) from e

    async def summarize(self, request: SummaryRequest | Mapping[str, Any]) -> SummaryResult:
        """
        Run one summarize request end to end.

        Raises:
            RequestInProgressError: Another request is in flight in this context
            ValidationError: Malformed request or empty text after sanitizing
            QuotaError: Daily summary limit reached
            PlanRestrictionError: Summary type or code explanation not in plan
            SummarizationFailedError: The AI call failed for any reason
        """
        if self._state is RequestState.IN_FLIGHT:
            raise RequestInProgressError()
        summary_request = self._validate(request)

        self._acquire()
        try:
            return await self._run(summary_request)
        finally:
            self._release()

    async def _run(self, request: SummaryRequest) -> SummaryResult:
        email = request.email or ""
        resolution = await self.entitlement_service.resolve_plan(request.email)
        limits = compute_limits(resolution.subscription)

        remaining = self.usage_tracker.remaining(email, limits)
        if remaining is not None and remaining <= 0:
            raise QuotaError(MSG_QUOTA_REACHED)

        if request.type not in limits.allowed_types:
            raise PlanRestrictionError(MSG_TYPE_NOT_ALLOWED)

        if request.is_code and not limits.allow_code_explanation:
            raise PlanRestrictionError(MSG_CODE_NOT_ALLOWED)

        sanitized = sanitize_text(request.text)
        if not sanitized:
            raise ValidationError(MSG_EMPTY_TEXT)

        is_code = request.is_code or is_code_snippet(sanitized)
        prompt = build_prompt(sanitized, request.type, is_code)

        try:
            summary = await self.ai_client.generate(prompt)
            result = SummaryResult(summary=summary, is_code=is_code)
        except Exception as e:
            logger.error(
                "summary_failed",
                email=request.email,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise SummarizationFailedError() from e

        used = self.usage_tracker.record(email)
        logger.info(
            "summary_completed",
            email=request.email,
            plan=resolution.subscription.plan.value,
            plan_source=resolution.source.value,
            is_code=is_code,
            used_today=used,
        )
        return result
