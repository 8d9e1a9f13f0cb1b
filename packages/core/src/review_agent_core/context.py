"""Diff and file-content extraction from the local checkout.

Everything here reads the workspace produced by materialize_workspace, so the
diff, the file contents and the test run all see the same head commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from review_agent_core.runner import run_checked
from review_agent_core.utils.code import is_code_file, is_excluded
from review_agent_core.utils.text import truncate

logger = logging.getLogger(__name__)

_BINARY_SNIFF_BYTES = 8192


@dataclass
class DiffContext:
    """Code under review for one run."""

    diff: str = ""
    # Post-change contents keyed by repository-relative path, already
    # truncated to the per-file budget. Empty when collection is disabled.
    changed_files: dict[str, str] = field(default_factory=dict)
    test_output: str = ""
    tests_ran: bool = False


def get_unified_diff(runner, work_dir: str | Path, base_sha: str, head_sha: str, context_lines: int = 3) -> str:
    result = run_checked(runner, "git", ["diff", f"--unified={context_lines}", base_sha, head_sha], work_dir)
    return result.stdout


def get_changed_paths(runner, work_dir: str | Path, base_sha: str, head_sha: str) -> list[str]:
    """Return paths added or modified between base and head (deletions excluded)."""
    result = run_checked(runner, "git", ["diff", "--name-only", "--diff-filter=d", base_sha, head_sha], work_dir)
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def _read_text(path: Path) -> str | None:
    """Return file text, or None for binary or unreadable files."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return None
    if b"\x00" in raw[:_BINARY_SNIFF_BYTES]:
        logger.debug("Skipping binary file %s", path)
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Skipping non-UTF-8 file %s", path)
        return None


def read_changed_files(
    work_dir: str | Path,
    paths: list[str],
    max_chars_per_file: int,
    exclude: list[str] | None = None,
) -> dict[str, str]:
    """Read post-change contents of the given paths.

    Files that are excluded, non-code, binary or unreadable are skipped
    without failing the extraction.
    """
    root = Path(work_dir)
    exclude = exclude or []
    files: dict[str, str] = {}
    for rel_path in paths:
        if is_excluded(rel_path, exclude) or not is_code_file(rel_path):
            logger.debug("Skipping %s (excluded or non-code)", rel_path)
            continue
        content = _read_text(root / rel_path)
        if content is None:
            continue
        files[rel_path] = truncate(content, max_chars_per_file)
    return files


def build_diff_context(runner, work_dir: str | Path, base_sha: str, head_sha: str, config: dict) -> DiffContext:
    diff = get_unified_diff(runner, work_dir, base_sha, head_sha, config.get("diff_context_lines", 3))
    changed_files: dict[str, str] = {}
    if config.get("include_file_contents", False):
        paths = get_changed_paths(runner, work_dir, base_sha, head_sha)
        changed_files = read_changed_files(
            work_dir,
            paths,
            config.get("max_chars_per_file", 6000),
            config.get("exclude", []),
        )
        logger.info("Collected contents of %d of %d changed file(s)", len(changed_files), len(paths))
    return DiffContext(diff=diff, changed_files=changed_files)
