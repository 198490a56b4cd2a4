"""Input cleanup and code detection for selected text."""

import re
from typing import Any

from summarizer.constants import MAX_TEXT_LENGTH, STRIPPED_CHARACTERS

_STRIP_PATTERN = re.compile(f"[{re.escape(STRIPPED_CHARACTERS)}]")

CODE_INDICATORS: list[re.Pattern[str]] = [
    re.compile(r"\b(function|class|if|for|while|return|import|export|const|let|var)\b"),
    re.compile(r"[{}();]"),
    re.compile(r"\b(true|false|null|undefined)\b"),
    re.compile(r"\b(console|document|window)\."),
]


def sanitize_text(text: Any) -> str:
    """
    Trim, truncate to MAX_TEXT_LENGTH and drop ``<>"'&``.

    This is lossy character stripping, not HTML escaping, and is not a
    defense against injection. Non-string input yields an empty string.
    """
    if not isinstance(text, str):
        return ""
    return _STRIP_PATTERN.sub("", text.strip()[:MAX_TEXT_LENGTH])


def is_code_snippet(text: str) -> bool:
    """Heuristic: True if any code indicator matches. Not a parser."""
    return any(pattern.search(text) for pattern in CODE_INDICATORS)
