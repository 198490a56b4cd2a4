"""
Prompts for the AI generation endpoint.
The endpoint returns free text; nothing here constrains its output format.
"""

from summarizer.models.summary import SummaryType

# Prompt for explaining a code snippet
CODE_EXPLANATION_PROMPT = """You are a senior software engineer.

Purpose: Explain what this code does in simple terms.

How it works: Provide a clear, step-by-step explanation.

Key points: Highlight the most important aspects of the code.

Do NOT rewrite the code."""


# Prompts for summarizing prose, one per summary type
SUMMARY_PROMPTS: dict[SummaryType, str] = {
    SummaryType.SHORT: """You are a professional writing assistant.

Summary:
Provide a concise summary (1-2 sentences) with a clear heading.""",
    SummaryType.MEDIUM: """You are a professional writing assistant.

Summary:
Provide a detailed summary (3-5 sentences) with a clear heading.""",
    SummaryType.BULLET: """You are a professional writing assistant.

Summary:
Provide a bullet-point summary with key points and a clear heading.""",
}


def build_prompt(text: str, summary_type: SummaryType | str, is_code: bool) -> str:
    """
    Build the instruction string sent to the AI endpoint.

    Args:
        text: Already-sanitized input text
        summary_type: Requested style; ignored for code. Unknown values fall back to medium.
        is_code: Use the code-explanation template instead of a summary template

    Returns:
        Template followed by the text
    """
    if is_code:
        return f"{CODE_EXPLANATION_PROMPT}\n\nCode:\n{text}"

    try:
        template = SUMMARY_PROMPTS[SummaryType(summary_type)]
    except ValueError:
        template = SUMMARY_PROMPTS[SummaryType.MEDIUM]
    return f"{template}\n\nText:\n{text}"
