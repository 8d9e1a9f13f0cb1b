"""Exception types raised by the review pipeline.

The orchestrator maps each type to a distinct user-visible outcome:

- ConfigurationError → diagnostic output, failed exit status
- PolicyRejection    → one explanatory PR comment, failed exit status
- CommandFailed      → captured output surfaced (logged or posted), failed exit status
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from review_agent_core.runner import CommandResult


class ReviewAgentError(Exception):
    """Base class for all review-agent errors."""


class ConfigurationError(ReviewAgentError):
    """Missing credentials, event context or other required settings."""


class PolicyRejection(ReviewAgentError):
    """The run is refused by rule (fork PR, no usable test command)."""


class CommandFailed(ReviewAgentError):
    """A local command exited non-zero or timed out."""

    def __init__(self, cmd: str, args: list[str], result: CommandResult, output: str | None = None):
        self.cmd = cmd
        self.args_list = list(args)
        self.result = result
        # Callers running several steps pass the output accumulated so far.
        self.output = output if output is not None else result.output
        super().__init__(f"{cmd} {' '.join(args)} exited with status {result.exit_code}")
