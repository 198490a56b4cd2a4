"""
Data models for summarization requests and extension messages.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SummaryType(str, Enum):
    """Summary styles the user can request."""

    SHORT = "short"
    MEDIUM = "medium"
    BULLET = "bullet"


class MessageAction(str, Enum):
    """Extension message discriminators."""

    SUMMARIZE_TEXT = "summarizeText"
    GET_PREFERENCES = "getPreferences"
    SAVE_PREFERENCES = "savePreferences"
    UPGRADE_TO_PRO = "upgradeToPro"
    GET_SELECTED_TEXT = "getSelectedText"


class SummaryRequest(BaseModel):
    """A single summarize action from the extension. Never persisted."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(description="Selected text or code")
    type: SummaryType = Field(description="Requested summary style")
    is_code: bool = Field(default=False, alias="isCode", description="Caller believes text is code")
    email: str | None = Field(default=None, description="User email for plan lookup")


class SummaryResult(BaseModel):
    """Successful summarization."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    is_code: bool = Field(alias="isCode")
