"""CLI entry point for review-agent.

Commands:
  run     — handle a GitHub issue_comment webhook event (the CI entry point)
  review  — review a pull request by number, without the trigger comment
  init    — write .review-agent.yml and a GitHub Actions workflow
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from review_agent_cli.commands.init import init_cmd
from review_agent_cli.commands.review import review_cmd
from review_agent_cli.commands.run import run_cmd

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """Configure the root logger once for the whole process."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=_LOG_FORMAT)


@click.group()
@click.version_option(
    version=importlib.metadata.version("review-agent"),
    prog_name="review-agent",
)
@click.option(
    "--config",
    "config_path",
    default=".review-agent.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVIEW_AGENT_CONFIG",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str):
    """LLM-backed pull request reviewer triggered from PR comments."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(run_cmd)
main.add_command(review_cmd)
main.add_command(init_cmd)
