"""Test-suite detection and execution for the checked-out project.

A broken build is reported as-is rather than reviewed, so the test stage runs
before the model is ever called.
"""

from __future__ import annotations

import json
import logging
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from review_agent_core.errors import CommandFailed, PolicyRejection

logger = logging.getLogger(__name__)

# npm writes this placeholder into package.json on `npm init`.
_PLACEHOLDER_RE = re.compile(r"no test specified", re.IGNORECASE)

_PLAYWRIGHT_PACKAGES = ("@playwright/test", "playwright")
_DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")


@dataclass
class CheckStep:
    cmd: str
    args: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return " ".join([self.cmd, *self.args])


@dataclass
class CheckPlan:
    """Install steps followed by the test command, run in order."""

    install: list[CheckStep] = field(default_factory=list)
    test: CheckStep | None = None

    @property
    def steps(self) -> list[CheckStep]:
        return [*self.install, *([self.test] if self.test else [])]


def _step_from_string(command: str) -> CheckStep:
    parts = shlex.split(command)
    if not parts:
        raise PolicyRejection("Configured test command is empty.")
    return CheckStep(parts[0], parts[1:])


def uses_playwright(package: dict) -> bool:
    for section in _DEPENDENCY_SECTIONS:
        deps = package.get(section)
        if isinstance(deps, dict) and any(name in deps for name in _PLAYWRIGHT_PACKAGES):
            return True
    return False


def detect_test_plan(work_dir: str | Path, config: dict | None = None) -> CheckPlan:
    """Work out how to install and test the checked-out project.

    A ``test_command`` in config takes precedence over package.json. Raises
    PolicyRejection when no real test command is declared.
    """
    config = config or {}
    configured = config.get("test_command")
    if configured:
        install_command = config.get("install_command")
        install = [_step_from_string(install_command)] if install_command else []
        return CheckPlan(install=install, test=_step_from_string(configured))

    package_path = Path(work_dir) / "package.json"
    try:
        package = json.loads(package_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        raise PolicyRejection("package.json not found. Cannot run npm test.")

    if not isinstance(package, dict):
        raise PolicyRejection("package.json is not a JSON object. Cannot run npm test.")

    scripts = package.get("scripts")
    test_script = scripts.get("test") if isinstance(scripts, dict) else None
    if not isinstance(test_script, str) or not test_script.strip() or _PLACEHOLDER_RE.search(test_script):
        raise PolicyRejection('No valid npm test script found. Please define a real "test" script in package.json.')

    install = [CheckStep("npm", ["ci"])]
    if uses_playwright(package):
        install.append(CheckStep("npx", ["playwright", "install", "--with-deps", "chromium"]))
    return CheckPlan(install=install, test=CheckStep("npm", ["test"]))


def run_test_plan(runner, work_dir: str | Path, plan: CheckPlan) -> str:
    """Run every step of the plan and return the combined output.

    Raises CommandFailed on the first failing step; its ``output`` holds
    everything captured up to and including that step.
    """
    collected = ""
    for step in plan.steps:
        logger.info("Running %s", step)
        result = runner.run(step.cmd, step.args, work_dir)
        collected += result.output
        if not result.ok:
            raise CommandFailed(step.cmd, step.args, result, output=collected)
    return collected
