"""init command — set up review-agent in a repository.

Writes .review-agent.yml and a GitHub Actions workflow that runs
`review-agent run` whenever a PR comment is created.
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

from review_agent_core.config import DEFAULT_TRIGGER

console = Console()

_CONFIG_PATH = Path(".review-agent.yml")
_WORKFLOW_PATH = Path(".github/workflows/review-agent.yml")

_WORKFLOW_TEMPLATE = """\
name: Review Agent

on:
  issue_comment:
    types: [created]

jobs:
  review:
    if: ${{{{ github.event.issue.pull_request }}}}
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: write
      issues: write

    steps:
      - uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - uses: actions/setup-node@v4
        with:
          node-version: "20"

      - name: Install review-agent
        run: pip install "review-agent=={version}"

      - name: Run review agent
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
          {api_key_env}: ${{{{ secrets.{api_key_env} }}}}
        # Exit status 78 means nothing to do: no trigger, or commit already reviewed.
        run: review-agent run || [ $? -eq 78 ]
"""


def _get_version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("review-agent")
    except PackageNotFoundError:
        return "0.1.0"


def _write_config(config: dict, path: Path = _CONFIG_PATH) -> None:
    """Write or update the config file, preserving keys already present."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _write_workflow(api_key_env: str, path: Path = _WORKFLOW_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_WORKFLOW_TEMPLATE.format(api_key_env=api_key_env, version=_get_version()))


@click.command("init")
@click.option("--model", type=click.Choice(["openai", "anthropic"]), default=None, help="Model provider.")
@click.option("--no-workflow", is_flag=True, help="Only write .review-agent.yml.")
def init_cmd(model: str | None, no_workflow: bool):
    """Create .review-agent.yml and a GitHub Actions workflow."""
    if model is None:
        model = click.prompt("Model provider", type=click.Choice(["openai", "anthropic"]), default="openai")
    api_key_env = "OPENAI_API_KEY" if model == "openai" else "ANTHROPIC_API_KEY"

    config: dict = {"model": model, "trigger": DEFAULT_TRIGGER}
    if not click.confirm("Run the project's test suite before reviewing?", default=True):
        config["run_tests"] = False

    _write_config(config)
    console.print(f"[green]Wrote {_CONFIG_PATH}[/green]")

    if not no_workflow:
        _write_workflow(api_key_env)
        console.print(f"[green]Wrote {_WORKFLOW_PATH}[/green]")
        console.print(
            f"\n[yellow]Add [bold]{api_key_env}[/bold] to the repository secrets "
            "(Settings → Secrets and variables → Actions).[/yellow]"
        )

    console.print(f'\nComment "[bold]{DEFAULT_TRIGGER}[/bold]" on a pull request to request a review.')
