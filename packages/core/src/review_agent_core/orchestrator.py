"""Core PR review orchestration.

One event, one pass, strictly sequential:

    trigger gate → resolve PR → fork policy → idempotency check
      → checkout → diff/context → tests → prompt → model (+1 retry) → publish

Any step may end the run. Each ending is a named Outcome that the CLI maps to
a process exit status, and at most one comment or review is posted per run.

The idempotency check is read-then-act: two invocations for the same head
commit that start at the same moment can both pass it before either posts.
That race is accepted; there is no lock.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path

from github import GithubException
from rich.console import Console

from review_agent_core.checks import detect_test_plan, run_test_plan
from review_agent_core.config import DEFAULT_TRIGGER, load_guidelines
from review_agent_core.context import DiffContext, build_diff_context
from review_agent_core.errors import CommandFailed, ConfigurationError, PolicyRejection
from review_agent_core.events import ReviewEvent
from review_agent_core.gh.pull_request import (
    FORK_REJECTION_MESSAGE,
    PullRequestRef,
    clone_url,
    get_pull,
    get_repo,
    has_review_for_commit,
    post_comment,
    publish_review,
)
from review_agent_core.prompt import build_prompt, build_retry_prompt
from review_agent_core.providers.responses import default_review_text
from review_agent_core.reviewer import generate_review, get_reviewer
from review_agent_core.runner import CommandRunner, redact
from review_agent_core.trigger import is_triggered
from review_agent_core.utils.text import truncate
from review_agent_core.workspace import materialize_workspace

console = Console()
logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    REVIEWED = "reviewed"
    NOTHING_TO_DO = "nothing_to_do"
    FAILED = "failed"


@dataclass
class RunResult:
    outcome: Outcome
    message: str = ""
    head_sha: str | None = None
    review_body: str | None = None

    def exit_code(self, neutral_exit_code: int = 78) -> int:
        if self.outcome is Outcome.REVIEWED:
            return 0
        if self.outcome is Outcome.NOTHING_TO_DO:
            return neutral_exit_code
        return 1


class ReviewOrchestrator:
    """Drive one review run with injected collaborators.

    repo_obj: PyGithub Repository; fetched with the configured token if None.
    runner:   object with run(cmd, args, cwd) -> CommandResult.
    reviewer: completion client with complete(prompt) -> str; built from
              config only when a review is actually needed.
    workspace: directory under which the checkout is created.
    """

    def __init__(self, config: dict, repo_obj=None, runner=None, reviewer=None, workspace: str | Path | None = None):
        self.config = config
        self.repo_obj = repo_obj
        self.runner = runner if runner is not None else CommandRunner(timeout=config.get("command_timeout", 1800))
        self.reviewer = reviewer
        self.workspace = Path(workspace) if workspace is not None else Path.cwd()

    @property
    def work_dir(self) -> Path:
        return self.workspace / self.config.get("work_dir", ".review-agent-work")

    def run(self, event: ReviewEvent, check_trigger: bool = True) -> RunResult:
        if check_trigger and not is_triggered(event.comment_body, self.config.get("trigger", DEFAULT_TRIGGER)):
            console.print("[dim]Trigger not found. Exiting.[/dim]")
            return RunResult(Outcome.NOTHING_TO_DO, "trigger not found")

        try:
            repo = self.repo_obj if self.repo_obj is not None else get_repo(event.full_name, self.config["github_token"])
            pr = get_pull(repo, event.issue_number)
        except GithubException as e:
            logger.error("PR #%d not found in %s: %s", event.issue_number, event.full_name, e)
            return RunResult(Outcome.FAILED, "PR not found")

        ref = PullRequestRef.from_pull(pr)

        if ref.is_fork:
            self._comment(pr, FORK_REJECTION_MESSAGE)
            console.print("[yellow]Fork PR rejected.[/yellow]")
            return RunResult(Outcome.FAILED, FORK_REJECTION_MESSAGE, head_sha=ref.head_sha)

        try:
            already_reviewed = has_review_for_commit(pr, ref.head_sha)
        except GithubException as e:
            logger.error("Could not list reviews on PR #%d: %s", ref.number, e)
            return RunResult(Outcome.FAILED, "could not list reviews", head_sha=ref.head_sha)
        if already_reviewed:
            console.print(f"[yellow]Review already exists for commit {ref.head_sha[:7]}. Exiting.[/yellow]")
            return RunResult(Outcome.NOTHING_TO_DO, "already reviewed", head_sha=ref.head_sha)

        console.print(f"[cyan]Reviewing #{ref.number} at {ref.head_sha[:7]} against {ref.base_sha[:7]}[/cyan]")

        try:
            context = self._collect_context(event, ref)
        except CommandFailed as e:
            output = redact(e.output, self.config.get("github_token"))
            logger.error("Checkout failed: %s\n%s", redact(str(e), self.config.get("github_token")), output)
            return RunResult(Outcome.FAILED, "checkout failed", head_sha=ref.head_sha)

        failure = self._run_tests(pr, context)
        if failure is not None:
            return RunResult(Outcome.FAILED, failure, head_sha=ref.head_sha)

        try:
            reviewer = self.reviewer if self.reviewer is not None else get_reviewer(self.config)
        except ConfigurationError as e:
            self._comment(pr, str(e))
            return RunResult(Outcome.FAILED, str(e), head_sha=ref.head_sha)

        guidelines = load_guidelines(self.config)
        prompt = build_prompt(ref, context, self.config, guidelines)
        retry_prompt = build_retry_prompt(ref, context, self.config)

        try:
            result = generate_review(
                reviewer, prompt, retry_prompt, default=default_review_text(context.tests_ran)
            )
        except Exception as e:
            logger.error("Review generation failed: %s", e)
            self._comment(pr, f"Review generation failed: {e}")
            return RunResult(Outcome.FAILED, "review generation failed", head_sha=ref.head_sha)

        try:
            body = publish_review(pr, result.text, ref.head_sha)
        except GithubException as e:
            logger.error("Could not publish review on PR #%d: %s", ref.number, e)
            return RunResult(Outcome.FAILED, "publish failed", head_sha=ref.head_sha)
        console.print(f"[green]Review posted for {ref.head_sha[:7]}.[/green]")
        return RunResult(Outcome.REVIEWED, "review posted", head_sha=ref.head_sha, review_body=body)

    def _comment(self, pr, body: str) -> None:
        """Post an explanatory comment; a failure to post is logged, not raised."""
        try:
            post_comment(pr, body)
        except GithubException as e:
            logger.error("Could not comment on PR #%d: %s", pr.number, e)

    def _collect_context(self, event: ReviewEvent, ref: PullRequestRef) -> DiffContext:
        url = clone_url(event.owner, event.repo, self.config.get("github_token") or "")
        work_dir = materialize_workspace(
            self.runner,
            self.work_dir,
            url,
            ref.base_sha,
            ref.head_sha,
            depth=self.config.get("fetch_depth", 50),
        )
        return build_diff_context(self.runner, work_dir, ref.base_sha, ref.head_sha, self.config)

    def _run_tests(self, pr, context: DiffContext) -> str | None:
        """Run the project's tests into context; return a failure message or None."""
        if not self.config.get("run_tests", True):
            return None

        try:
            plan = detect_test_plan(self.work_dir, self.config)
        except PolicyRejection as e:
            if self.config.get("require_tests", True):
                self._comment(pr, str(e))
                return str(e)
            console.print(f"[yellow]Skipping tests: {e}[/yellow]")
            return None

        try:
            context.test_output = run_test_plan(self.runner, self.work_dir, plan)
        except CommandFailed as e:
            output = truncate(e.output or str(e), self.config.get("max_test_chars", 8000))
            self._comment(pr, f"Tests failed (`{e.cmd} {' '.join(e.args_list)}`). Output:\n\n```\n{output}\n```")
            console.print("[red]Tests failed; review skipped.[/red]")
            return "tests failed"
        context.tests_ran = True
        return None
