from __future__ import annotations


def truncate(text: str | None, max_chars: int) -> str:
    """Cut text to max_chars and say how much was dropped.

    Text at or under the budget is returned unchanged.
    """
    if not text:
        return ""
    if len(text) <= max_chars:
        return text
    omitted = len(text) - max_chars
    return f"{text[:max_chars]}\n... [truncated {omitted} characters]"
