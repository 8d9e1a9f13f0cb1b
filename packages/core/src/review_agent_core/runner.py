"""Local command execution.

Everything the orchestrator does on the local machine (git, npm, npx) goes
through CommandRunner.run so tests can substitute a deterministic fake.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from review_agent_core.errors import CommandFailed

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 1800
_TIMEOUT_EXIT_CODE = 124


@dataclass
class CommandResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, in that order."""
        return f"{self.stdout}{self.stderr}"

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """Run a command to completion and capture its output.

    Never raises for a non-zero exit; a missing executable or a timeout is
    reported as a failed CommandResult so callers handle one shape only.
    """

    def __init__(self, timeout: int = _DEFAULT_TIMEOUT, env: dict | None = None):
        self.timeout = timeout
        self.env = env

    def run(self, cmd: str, args: list[str], cwd: str | Path) -> CommandResult:
        logger.debug("Running %s %s in %s", cmd, " ".join(args), cwd)
        try:
            completed = subprocess.run(
                [cmd, *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                env=self.env if self.env is not None else os.environ.copy(),
            )
        except FileNotFoundError:
            return CommandResult(stderr=f"{cmd}: command not found\n", exit_code=127)
        except subprocess.TimeoutExpired as e:
            stdout = e.stdout.decode(errors="replace") if isinstance(e.stdout, bytes) else (e.stdout or "")
            stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else (e.stderr or "")
            return CommandResult(
                stdout=stdout,
                stderr=f"{stderr}{cmd} timed out after {self.timeout}s\n",
                exit_code=_TIMEOUT_EXIT_CODE,
            )
        return CommandResult(stdout=completed.stdout or "", stderr=completed.stderr or "", exit_code=completed.returncode)


def run_checked(runner, cmd: str, args: list[str], cwd: str | Path) -> CommandResult:
    """Run a command and raise CommandFailed on a non-zero exit."""
    result = runner.run(cmd, args, cwd)
    if not result.ok:
        raise CommandFailed(cmd, args, result)
    return result


def redact(text: str, secret: str | None) -> str:
    """Replace every occurrence of secret in text."""
    if not secret:
        return text
    return text.replace(secret, "***")
