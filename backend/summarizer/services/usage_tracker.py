"""Daily summary counters backing the plan quota."""

from datetime import UTC, date, datetime

from summarizer.models.billing import Limits


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UsageTracker:
    """Per-email summary count for the current UTC day.

    Counts live in memory for one execution context and reset at the first
    lookup on a new day.
    """

    def __init__(self, now_provider=_utcnow) -> None:
        self.now_provider = now_provider
        self._counts: dict[str, tuple[date, int]] = {}

    def used_today(self, email: str) -> int:
        today = self.now_provider().date()
        usage_date, count = self._counts.get(email, (today, 0))
        if usage_date != today:
            return 0
        return count

    def remaining(self, email: str, limits: Limits) -> int | None:
        """Summaries left today, or None when the plan is unbounded."""
        if limits.max_summaries is None:
            return None
        return max(0, limits.max_summaries - self.used_today(email))

    def record(self, email: str) -> int:
        """Count one completed summary and return today's total."""
        count = self.used_today(email) + 1
        self._counts[email] = (self.now_provider().date(), count)
        return count
