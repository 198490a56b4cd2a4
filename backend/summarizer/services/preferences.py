"""User preferences for the extension (currently the preferred summary type)."""

from summarizer.models.summary import SummaryType

DEFAULT_SUMMARY_TYPE = SummaryType.SHORT


class PreferencesStore:
    """In-memory preferred summary type per user; ``""`` keys the anonymous user."""

    def __init__(self) -> None:
        self._preferred_types: dict[str, SummaryType] = {}

    def get_preferred_type(self, user_key: str = "") -> SummaryType:
        return self._preferred_types.get(user_key, DEFAULT_SUMMARY_TYPE)

    def save_preferred_type(self, summary_type: SummaryType, user_key: str = "") -> None:
        self._preferred_types[user_key] = summary_type
