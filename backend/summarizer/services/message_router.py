"""
Background worker message dispatch.

Each message is a dict with an ``action`` discriminator and an
action-specific payload. Every handler returns a response dict; expected
failures become ``{"error": <short user-readable string>}`` and never raise.

Every extension instance is its own execution context: summarize requests are
routed to an orchestrator keyed by the message's ``clientId`` (or its email
when no id is sent), so the single-flight slot and daily usage are per client.
"""

from typing import Any, Awaitable, Callable
from urllib.parse import urlencode

import structlog

from summarizer.constants import (
    MSG_EMAIL_REQUIRED,
    MSG_INVALID_REQUEST,
    MSG_NO_SELECTION,
    MSG_UNKNOWN_ACTION,
)
from summarizer.errors import SummaryServiceError
from summarizer.models.summary import MessageAction, SummaryType
from summarizer.services.entitlement_service import EntitlementService
from summarizer.services.orchestrator import RequestOrchestrator
from summarizer.services.preferences import PreferencesStore

logger = structlog.get_logger(__name__)

Handler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]

# Context for messages that carry neither a client id nor an email.
ANONYMOUS_CONTEXT = "anonymous"


def context_key(message: dict[str, Any]) -> str:
    for field in ("clientId", "email"):
        value = message.get(field)
        if isinstance(value, str) and value:
            return f"{field}:{value}"
    return ANONYMOUS_CONTEXT


class MessageRouter:
    """Routes extension actions to per-client orchestrators and local stores."""

    def __init__(
        self,
        entitlement_service: EntitlementService,
        orchestrator_factory: Callable[[], RequestOrchestrator],
        preferences: PreferencesStore | None = None,
        checkout_url: str = "",
        selection_provider: Callable[[], str | None] | None = None,
    ) -> None:
        self.entitlement_service = entitlement_service
        self.orchestrator_factory = orchestrator_factory
        self._orchestrators: dict[str, RequestOrchestrator] = {}
        self.preferences = preferences or PreferencesStore()
        self.checkout_url = checkout_url
        self.selection_provider = selection_provider
        self._handlers: dict[MessageAction, Handler] = {
            MessageAction.SUMMARIZE_TEXT: self._summarize_text,
            MessageAction.GET_PREFERENCES: self._get_preferences,
            MessageAction.SAVE_PREFERENCES: self._save_preferences,
            MessageAction.UPGRADE_TO_PRO: self._upgrade_to_pro,
            MessageAction.GET_SELECTED_TEXT: self._get_selected_text,
        }

    async def handle(self, message: dict[str, Any]) -> dict[str, Any]:
        try:
            action = MessageAction(message.get("action"))
        except ValueError:
            logger.warning("message_action_unknown", action=message.get("action"))
            return {"error": MSG_UNKNOWN_ACTION}

        try:
            return await self._handlers[action](message)
        except SummaryServiceError as e:
            logger.info("message_rejected", action=action.value, error_type=type(e).__name__)
            return {"error": e.user_message}

    def orchestrator_for(self, message: dict[str, Any]) -> RequestOrchestrator:
        """Return the orchestrator owning this message's execution context."""
        key = context_key(message)
        orchestrator = self._orchestrators.get(key)
        if orchestrator is None:
            orchestrator = self.orchestrator_factory()
            self._orchestrators[key] = orchestrator
        return orchestrator

    async def _summarize_text(self, message: dict[str, Any]) -> dict[str, Any]:
        result = await self.orchestrator_for(message).summarize(message)
        return result.model_dump(by_alias=True)

    async def _get_preferences(self, message: dict[str, Any]) -> dict[str, Any]:
        preferred = self.preferences.get_preferred_type(message.get("email") or "")
        return {"preferredType": preferred.value}

    async def _save_preferences(self, message: dict[str, Any]) -> dict[str, Any]:
        try:
            summary_type = SummaryType(message.get("type"))
        except ValueError:
            return {"error": MSG_INVALID_REQUEST}
        self.preferences.save_preferred_type(summary_type, message.get("email") or "")
        return {"success": True}

    async def _upgrade_to_pro(self, message: dict[str, Any]) -> dict[str, Any]:
        email = message.get("email")
        if not email or not isinstance(email, str):
            return {"error": MSG_EMAIL_REQUIRED}

        # The plan changes once checkout completes; force a fresh lookup.
        self.entitlement_service.invalidate(email)
        checkout_url = f"{self.checkout_url}?{urlencode({'prefilled_email': email})}"
        logger.info("upgrade_checkout_issued", email=email)
        return {"success": True, "checkoutUrl": checkout_url}

    async def _get_selected_text(self, message: dict[str, Any]) -> dict[str, Any]:
        text = self.selection_provider() if self.selection_provider else None
        if not text:
            return {"error": MSG_NO_SELECTION}
        return {"text": text}
