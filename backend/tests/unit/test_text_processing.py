"""Unit tests for text sanitization and code detection."""

import pytest

from summarizer.constants import MAX_TEXT_LENGTH
from summarizer.services.text_processing import is_code_snippet, sanitize_text


class TestSanitizeText:
    @pytest.mark.parametrize("value", [None, 42, 3.5, ["a"], {"text": "x"}, b"bytes"])
    def test_non_string_returns_empty(self, value):
        assert sanitize_text(value) == ""

    def test_trims_whitespace(self):
        assert sanitize_text("   hello world \n\t") == "hello world"

    def test_removes_disallowed_characters(self):
        assert sanitize_text("<b>Tom & \"Jerry\" 's</b>") == "bTom  Jerry s/b"

    def test_truncates_before_stripping(self):
        text = "a" * (MAX_TEXT_LENGTH - 1) + "<" + "bbbb"
        result = sanitize_text(text)
        assert result == "a" * (MAX_TEXT_LENGTH - 1)

    def test_over_length_input_is_bounded_and_clean(self):
        text = ("x<>\"'&" * 1000) + "tail"
        result = sanitize_text(text)
        assert len(result) <= MAX_TEXT_LENGTH
        assert not set(result) & set("<>\"'&")

    def test_only_disallowed_characters_becomes_empty(self):
        assert sanitize_text("  <>&  ") == ""

    def test_plain_text_unchanged(self):
        assert sanitize_text("The quick brown fox.") == "The quick brown fox."


class TestIsCodeSnippet:
    @pytest.mark.parametrize(
        "text",
        [
            "const total = items.length",
            "def f(x): return x",
            "if x > 3 then stop",
            "value = null",
            "console.log('hi')",
            "{ key: value }",
            "let answer be known",
        ],
    )
    def test_detects_code(self, text):
        assert is_code_snippet(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "The meeting moved to Tuesday afternoon.",
            "Photosynthesis converts light into chemical energy.",
            "",
        ],
    )
    def test_plain_prose_is_not_code(self, text):
        assert is_code_snippet(text) is False

    def test_keywords_must_be_whole_words(self):
        assert is_code_snippet("Classic iffy forward returns") is False
