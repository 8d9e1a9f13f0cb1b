"""run command — handle one GitHub issue_comment event."""

from __future__ import annotations

import click
from rich.console import Console

from review_agent_core.errors import ConfigurationError
from review_agent_core.events import load_event
from review_agent_core.orchestrator import ReviewOrchestrator
from review_agent_cli.commands.common import MODEL_CHOICE, load_command_config

console = Console()


@click.command("run")
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    default=None,
    help="Path to the webhook event JSON. Defaults to $GITHUB_EVENT_PATH.",
)
@click.option(
    "--workspace",
    envvar="GITHUB_WORKSPACE",
    default=None,
    help="Directory under which the PR is checked out. Defaults to $GITHUB_WORKSPACE or the current directory.",
)
@click.option("--model", type=MODEL_CHOICE, default=None, help="Model provider. Overrides config file.")
@click.pass_context
def run_cmd(ctx: click.Context, event_path: str | None, workspace: str | None, model: str | None):
    """Review the PR a trigger comment was posted on.

    \b
    Exit status:
      0    review posted
      1    run failed (a comment explains why when possible)
      78   nothing to do (no trigger, or commit already reviewed);
           configurable with neutral_exit_code

    \b
    Required environment variables:
      GITHUB_TOKEN         token with pull-requests: write
      GITHUB_EVENT_PATH    set by GitHub Actions
      OPENAI_API_KEY       or ANTHROPIC_API_KEY with --model anthropic
    """
    config = load_command_config(ctx, model, allow_gh_cli=False)

    if not event_path:
        raise click.UsageError("Missing GITHUB_EVENT_PATH (or --event-path).")
    try:
        event = load_event(event_path)
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    orchestrator = ReviewOrchestrator(config, workspace=workspace)
    result = orchestrator.run(event)
    console.print(f"[dim]Outcome: {result.outcome.value} ({result.message})[/dim]")
    ctx.exit(result.exit_code(config.get("neutral_exit_code", 78)))
