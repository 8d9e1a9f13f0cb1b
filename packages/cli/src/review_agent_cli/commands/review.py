"""review command — review a pull request by number."""

from __future__ import annotations

import click
from rich.console import Console

from review_agent_core.events import ReviewEvent
from review_agent_core.orchestrator import ReviewOrchestrator
from review_agent_cli.commands.common import MODEL_CHOICE, load_command_config

console = Console()


@click.command("review")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--model", type=MODEL_CHOICE, default=None, help="Model provider. Overrides config file.")
@click.option(
    "--workspace",
    default=None,
    help="Directory under which the PR is checked out. Defaults to the current directory.",
)
@click.pass_context
def review_cmd(ctx: click.Context, repo: str, pr_number: int, model: str | None, workspace: str | None):
    """Review a pull request without waiting for a trigger comment.

    Runs the same pipeline as `run`, skipping only the trigger check. A commit
    that already carries a review is still left alone.
    """
    owner, _, name = repo.partition("/")
    if not owner or not name or "/" in name:
        raise click.BadParameter("expected owner/name", param_hint="--repo")

    config = load_command_config(ctx, model, allow_gh_cli=True)

    event = ReviewEvent(comment_body="", issue_number=pr_number, repo=name, owner=owner)
    result = ReviewOrchestrator(config, workspace=workspace).run(event, check_trigger=False)
    console.print(f"[dim]Outcome: {result.outcome.value} ({result.message})[/dim]")
    ctx.exit(result.exit_code(config.get("neutral_exit_code", 78)))
