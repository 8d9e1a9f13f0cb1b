"""Shared fixtures: a scripted command runner and PyGithub stand-ins."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from review_agent_core.config import DEFAULT_CONFIG
from review_agent_core.runner import CommandResult


class FakeRunner:
    """Deterministic CommandRunner replacement.

    Responses are matched by command-line prefix (longest first); anything
    unmatched succeeds with empty output. Files registered with
    ``checkout_files`` are written into the working directory when
    ``git checkout`` runs, standing in for the fetched commit.
    """

    def __init__(self):
        self.calls: list[tuple[str, list[str], Path]] = []
        self.responses: dict[str, CommandResult] = {}
        self.checkout_files: dict[str, str | bytes] = {}

    def respond(self, prefix: str, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self.responses[prefix] = CommandResult(stdout=stdout, stderr=stderr, exit_code=exit_code)

    def run(self, cmd, args, cwd):
        self.calls.append((cmd, list(args), Path(cwd)))
        line = " ".join([cmd, *args])
        if line.startswith("git checkout"):
            for rel_path, content in self.checkout_files.items():
                target = Path(cwd) / rel_path
                target.parent.mkdir(parents=True, exist_ok=True)
                if isinstance(content, bytes):
                    target.write_bytes(content)
                else:
                    target.write_text(content)
        for prefix in sorted(self.responses, key=len, reverse=True):
            if line.startswith(prefix):
                return self.responses[prefix]
        return CommandResult()

    @property
    def command_lines(self) -> list[str]:
        return [" ".join([cmd, *args]) for cmd, args, _ in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


def _make_pr(
    head_sha="abc123",
    base_sha="def456",
    head_repo="octo/demo",
    base_repo="octo/demo",
    reviews=(),
    labels=("enhancement",),
):
    pr = MagicMock()
    pr.number = 7
    pr.head.sha = head_sha
    pr.base.sha = base_sha
    if head_repo is None:
        pr.head.repo = None
    else:
        pr.head.repo.full_name = head_repo
    pr.base.repo.full_name = base_repo
    pr.title = "Add counter widget"
    pr.body = "Adds a counter with increment and reset."
    pr.user.login = "octocat"
    label_mocks = []
    for name in labels:
        label = MagicMock()
        label.name = name
        label_mocks.append(label)
    pr.labels = label_mocks
    review_mocks = []
    for body in reviews:
        review = MagicMock()
        review.body = body
        review_mocks.append(review)
    pr.get_reviews.return_value = review_mocks
    return pr


@pytest.fixture
def base_config():
    config = {**DEFAULT_CONFIG, "exclude": []}
    config.update(
        {
            "github_token": "ghs_secret",
            "openai_api_key": "sk-test",
            "anthropic_api_key": None,
        }
    )
    return config


@pytest.fixture
def make_pr():
    """Factory for MagicMock pull requests shaped like PyGithub's PullRequest."""
    return _make_pr
