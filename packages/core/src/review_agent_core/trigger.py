"""Trigger phrase detection for PR comments."""

from __future__ import annotations

import re

# A fence opens with three or more backticks or tildes, optionally followed by
# an info string; a backtick info string may not itself contain a backtick.
# It closes with a bare run of the same character at least as long. An
# unterminated fence runs to the end of the comment, matching how GitHub
# renders it.
_OPEN_FENCE_RE = re.compile(r"^[ \t]{0,3}(`{3,}|~{3,})(.*)$")
_CLOSE_FENCE_RE = re.compile(r"^[ \t]{0,3}(`{3,}|~{3,})[ \t]*$")
_WHITESPACE_RE = re.compile(r"\s+")


def _opening_fence(line: str) -> str | None:
    match = _OPEN_FENCE_RE.match(line)
    if not match:
        return None
    fence, info = match.groups()
    if fence[0] == "`" and "`" in info:
        return None
    return fence


def strip_code_blocks(text: str) -> str:
    """Return text with every fenced code block removed."""
    kept: list[str] = []
    fence: str | None = None
    for line in text.splitlines():
        if fence is None:
            fence = _opening_fence(line)
            if fence is None:
                kept.append(line)
            continue
        match = _CLOSE_FENCE_RE.match(line)
        if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
            fence = None
    return "\n".join(kept)


def _normalize(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def is_triggered(comment_body: str | None, trigger: str) -> bool:
    """Return True if the trigger phrase appears outside any fenced code block.

    Matching ignores case and collapses runs of whitespace, so line breaks or
    double spaces inside the phrase do not prevent a match.
    """
    if not comment_body or not trigger.strip():
        return False
    return _normalize(trigger) in _normalize(strip_code_blocks(comment_body))
