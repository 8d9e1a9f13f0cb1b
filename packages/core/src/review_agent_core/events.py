"""Webhook event parsing.

Only the fields the orchestrator needs are read from the ``issue_comment``
payload that GitHub Actions writes to ``GITHUB_EVENT_PATH``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from review_agent_core.errors import ConfigurationError


@dataclass(frozen=True)
class ReviewEvent:
    comment_body: str
    issue_number: int
    repo: str
    owner: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_event(payload: dict) -> ReviewEvent:
    """Build a ReviewEvent from a decoded webhook payload.

    Raises ConfigurationError when the issue number or repository identity is
    missing. A missing comment body is treated as empty text.
    """
    comment = payload.get("comment") or {}
    issue = payload.get("issue") or {}
    repository = payload.get("repository") or {}
    owner = (repository.get("owner") or {}).get("login")

    issue_number = issue.get("number")
    repo = repository.get("name")
    if not issue_number or not owner or not repo:
        raise ConfigurationError("Missing issue or repo context in webhook event.")

    return ReviewEvent(
        comment_body=comment.get("body") or "",
        issue_number=int(issue_number),
        repo=repo,
        owner=owner,
    )


def load_event(event_path: str | Path) -> ReviewEvent:
    path = Path(event_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"Event file not found: {event_path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Event file is not valid JSON: {e}")
    if not isinstance(payload, dict):
        raise ConfigurationError("Event payload must be a JSON object.")
    return parse_event(payload)
