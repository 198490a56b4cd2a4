"""
Business logic constants for the summarizer service.

These values are stable across environments and do not need env-var
overrides. For operational parameters that vary per environment (timeouts,
retry budget, endpoints), see config.py.
"""

API_TITLE = "AI Summary API"
API_VERSION = "0.1.0"

# --- Text sanitization ---
MAX_TEXT_LENGTH = 3000
STRIPPED_CHARACTERS = "<>\"'&"

# --- Plan limits ---
FREE_MAX_SUMMARIES = 5

# --- AI response ---
RESPONSE_PLACEHOLDER = "Response not available."

# --- User-facing messages (returned verbatim to the extension) ---
MSG_IN_PROGRESS = "Request already in progress. Please wait."
MSG_INVALID_REQUEST = "Invalid request format."
MSG_QUOTA_REACHED = "Daily limit reached. Upgrade to Pro for unlimited access."
MSG_TYPE_NOT_ALLOWED = "This summary type is not available in the free plan."
MSG_CODE_NOT_ALLOWED = "Code explanation is a Pro feature. Upgrade to Pro to access this feature."
MSG_EMPTY_TEXT = "No valid text provided."
MSG_SUMMARIZATION_FAILED = "Unable to process. Please check your connection or API configuration."
MSG_EMAIL_REQUIRED = "Email is required to upgrade to Pro."
MSG_NO_SELECTION = "No text selected."
MSG_UNKNOWN_ACTION = "Unknown action."
