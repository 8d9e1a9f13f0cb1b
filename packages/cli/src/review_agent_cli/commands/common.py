"""Helpers shared by the run and review commands."""

from __future__ import annotations

import click

from review_agent_core.config import load_config, load_guidelines
from review_agent_cli.auth import resolve_github_token

MODEL_CHOICE = click.Choice(["openai", "anthropic"])


def load_command_config(ctx: click.Context, model: str | None, allow_gh_cli: bool) -> dict:
    """Load config for a command and fail fast on missing GitHub credentials.

    Nothing here contacts GitHub; a missing token or guidelines file is a
    usage error before any collaborator is touched.
    """
    config_path = (ctx.obj or {}).get("config_path", ".review-agent.yml")
    config = load_config(config_path, cli_overrides={"model": model})

    token = resolve_github_token(allow_gh_cli=allow_gh_cli)
    if not token:
        raise click.UsageError("Missing GITHUB_TOKEN. Set it in the environment or run `gh auth login`.")
    config["github_token"] = token

    try:
        load_guidelines(config)
    except FileNotFoundError as e:
        raise click.UsageError(str(e))

    return config
