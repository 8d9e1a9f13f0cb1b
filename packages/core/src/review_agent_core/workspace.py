"""Local checkout of the PR head commit.

The working directory is recreated on every run so nothing from a previous
invocation leaks into the diff or the test run. Only the base and head
commits are fetched, shallowly, which is enough for ``git diff base head``.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from review_agent_core.runner import run_checked

logger = logging.getLogger(__name__)

_DEFAULT_FETCH_DEPTH = 50


def reset_work_dir(work_dir: Path) -> None:
    if work_dir.exists():
        logger.debug("Removing previous work directory %s", work_dir)
        shutil.rmtree(work_dir)
    work_dir.mkdir(parents=True)


def materialize_workspace(
    runner,
    work_dir: str | Path,
    repo_url: str,
    base_sha: str,
    head_sha: str,
    depth: int = _DEFAULT_FETCH_DEPTH,
) -> Path:
    """Create a fresh checkout of head_sha with base_sha available for diffing.

    Raises CommandFailed on the first git command that fails; nothing is
    retried.
    """
    path = Path(work_dir)
    reset_work_dir(path)

    run_checked(runner, "git", ["init", "--quiet"], path)
    run_checked(runner, "git", ["remote", "add", "origin", repo_url], path)
    run_checked(runner, "git", ["fetch", "--quiet", "--depth", str(depth), "origin", base_sha, head_sha], path)
    run_checked(runner, "git", ["checkout", "--quiet", head_sha], path)
    return path
