"""Error taxonomy shared by the summary pipeline and the billing backend.

Every error carries a short ``user_message`` safe to show in the extension.
Routes translate these into HTTP status codes; the message router turns them
into ``{"error": ...}`` responses.
"""

from summarizer.constants import MSG_SUMMARIZATION_FAILED


class SummaryServiceError(Exception):
    """Base class for all expected failures."""

    user_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        if message:
            self.user_message = message


class ValidationError(SummaryServiceError):
    """Malformed input."""

    user_message = "Invalid request format."


class PlanRestrictionError(SummaryServiceError):
    """Feature not included in the user's plan."""

    user_message = "This feature is not available in your plan."


class QuotaError(SummaryServiceError):
    """Usage limit for the current window is exhausted."""

    user_message = "Usage limit reached."


class RequestInProgressError(SummaryServiceError):
    """Another request is already in flight in this context."""

    user_message = "Request already in progress. Please wait."


class TransportError(SummaryServiceError):
    """Network failure or timeout talking to a remote service."""

    user_message = "Network error."


class RemoteError(SummaryServiceError):
    """Remote service answered with a non-2xx status."""

    user_message = "Remote service error."

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"Remote service returned HTTP {status_code}")
        self.status_code = status_code


class SummarizationFailedError(SummaryServiceError):
    """Generic failure of the AI call, hiding transport details from the user."""

    user_message = MSG_SUMMARIZATION_FAILED


class SignatureError(SummaryServiceError):
    """Webhook signature could not be verified."""

    user_message = "Invalid webhook signature."


class UnhandledEventError(SummaryServiceError):
    """Webhook event type is not handled."""

    user_message = "Unhandled event type."


class StoreError(SummaryServiceError):
    """Subscription persistence failed."""

    user_message = "Internal Server Error"
