"""Prompt assembly for the review model.

Section order is fixed so the same inputs always produce the same prompt.
Each section is truncated against its own budget; a large diff never crowds
out the test output or the PR description.
"""

from __future__ import annotations

from review_agent_core.context import DiffContext
from review_agent_core.gh.pull_request import PullRequestRef
from review_agent_core.utils.text import truncate

_DEFAULT_MAX_DIFF_CHARS = 12000
_DEFAULT_MAX_TEST_CHARS = 8000
_DEFAULT_MAX_FILES_CHARS = 20000

_INSTRUCTIONS = [
    "You are a senior code reviewer. Provide a pragmatic, prioritized review.",
    "Prioritize correctness, security and semantic bugs over style.",
    "Avoid nitpicks and formatting-only comments.",
    "Reference files and diff snippets where possible.",
    "If unsure, state assumptions instead of asking questions.",
]

_RETRY_INSTRUCTIONS = [
    "A previous review of this pull request reported no issues.",
    "Look again for real defects: wrong logic, missed edge cases, unsafe error handling.",
    "Name the file and snippet for each problem.",
    'Only if there is genuinely nothing to report, reply "No issues found."',
]


def _no_issues_instruction(tests_ran: bool) -> str:
    if tests_ran:
        return 'If you find no issues, explicitly say "No issues found" and briefly confirm that tests passed.'
    return 'If you find no issues, explicitly say "No issues found".'


def _metadata_section(ref: PullRequestRef) -> list[str]:
    return [
        f"PR Title: {ref.title}",
        f"PR Author: {ref.author or '(unknown)'}",
        f"PR Labels: {', '.join(ref.labels) if ref.labels else '(none)'}",
        f"PR Description: {ref.body or '(none)'}",
    ]


def _files_section(changed_files: dict[str, str], max_chars: int) -> list[str]:
    if not changed_files:
        return []
    blocks = [f"--- {path} ---\n{content}" for path, content in changed_files.items()]
    return ["", "Changed Files (truncated):", truncate("\n\n".join(blocks), max_chars)]


def _context_sections(ref: PullRequestRef, context: DiffContext, config: dict) -> list[str]:
    lines = _metadata_section(ref)
    lines += _files_section(context.changed_files, config.get("max_files_chars", _DEFAULT_MAX_FILES_CHARS))
    if context.tests_ran:
        lines += [
            "",
            "Test Output (truncated):",
            truncate(context.test_output, config.get("max_test_chars", _DEFAULT_MAX_TEST_CHARS)) or "(no output)",
        ]
    lines += [
        "",
        "Unified Diff (truncated):",
        truncate(context.diff, config.get("max_diff_chars", _DEFAULT_MAX_DIFF_CHARS)) or "(no diff)",
    ]
    return lines


def build_prompt(ref: PullRequestRef, context: DiffContext, config: dict, guidelines: str = "") -> str:
    lines = [*_INSTRUCTIONS, _no_issues_instruction(context.tests_ran)]
    if guidelines.strip():
        lines += ["", "Team Guidelines:", guidelines.strip()]
    lines.append("")
    lines += _context_sections(ref, context, config)
    return "\n".join(lines)


def build_retry_prompt(ref: PullRequestRef, context: DiffContext, config: dict) -> str:
    """Shorter, more directive prompt for the second look after a clean verdict."""
    lines = [*_RETRY_INSTRUCTIONS, ""]
    lines += _context_sections(ref, context, config)
    return "\n".join(lines)
