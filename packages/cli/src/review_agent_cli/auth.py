"""GitHub token resolution.

In GitHub Actions the workflow passes GITHUB_TOKEN through the environment.
For a manual `review-agent review` on a developer machine, an existing GitHub
CLI session (`gh auth login`) is reused instead of requiring a PAT.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

_GH_TIMEOUT = 5


def _token_from_gh_cli() -> str | None:
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=_GH_TIMEOUT,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token(allow_gh_cli: bool = True) -> str | None:
    """Return a GitHub token, or None if no source provides one.

    GITHUB_TOKEN wins. The gh CLI fallback is skipped when allow_gh_cli is
    False, which the webhook command uses so CI never picks up a stray
    developer session.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token
    if not allow_gh_cli:
        return None
    token = _token_from_gh_cli()
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
    return token
