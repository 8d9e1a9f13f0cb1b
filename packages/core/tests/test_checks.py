"""Tests for test-suite detection and execution."""

import json

import pytest

from review_agent_core.checks import CheckStep, detect_test_plan, run_test_plan, uses_playwright
from review_agent_core.errors import CommandFailed, PolicyRejection


def _write_package(path, **fields):
    (path / "package.json").write_text(json.dumps(fields))


class TestDetectTestPlan:
    def test_npm_project(self, tmp_path):
        _write_package(tmp_path, scripts={"test": "vitest run"})
        plan = detect_test_plan(tmp_path)
        assert [str(s) for s in plan.steps] == ["npm ci", "npm test"]

    def test_playwright_project_installs_browser(self, tmp_path):
        _write_package(
            tmp_path,
            scripts={"test": "playwright test"},
            devDependencies={"@playwright/test": "^1.45.0"},
        )
        plan = detect_test_plan(tmp_path)
        assert [str(s) for s in plan.steps] == [
            "npm ci",
            "npx playwright install --with-deps chromium",
            "npm test",
        ]

    def test_missing_package_json_rejected(self, tmp_path):
        with pytest.raises(PolicyRejection, match="package.json not found"):
            detect_test_plan(tmp_path)

    def test_malformed_package_json_rejected(self, tmp_path):
        (tmp_path / "package.json").write_text("{")
        with pytest.raises(PolicyRejection):
            detect_test_plan(tmp_path)

    def test_missing_test_script_rejected(self, tmp_path):
        _write_package(tmp_path, scripts={"build": "vite build"})
        with pytest.raises(PolicyRejection, match="No valid npm test script"):
            detect_test_plan(tmp_path)

    def test_placeholder_test_script_rejected(self, tmp_path):
        _write_package(tmp_path, scripts={"test": 'echo "Error: no test specified" && exit 1'})
        with pytest.raises(PolicyRejection, match="No valid npm test script"):
            detect_test_plan(tmp_path)

    def test_non_object_package_json_rejected(self, tmp_path):
        (tmp_path / "package.json").write_text('["not", "an", "object"]')
        with pytest.raises(PolicyRejection, match="not a JSON object"):
            detect_test_plan(tmp_path)

    @pytest.mark.parametrize("scripts", [["test"], {"test": 1}, {"test": ["vitest"]}, {"test": "   "}, "vitest"])
    def test_malformed_test_script_rejected(self, tmp_path, scripts):
        _write_package(tmp_path, scripts=scripts)
        with pytest.raises(PolicyRejection, match="No valid npm test script"):
            detect_test_plan(tmp_path)

    def test_configured_command_wins(self, tmp_path):
        _write_package(tmp_path, scripts={"test": "vitest run"})
        plan = detect_test_plan(tmp_path, {"test_command": "pytest -q tests", "install_command": "pip install ."})
        assert plan.install == [CheckStep("pip", ["install", "."])]
        assert plan.test == CheckStep("pytest", ["-q", "tests"])

    def test_configured_command_without_install(self, tmp_path):
        plan = detect_test_plan(tmp_path, {"test_command": "make check"})
        assert [str(s) for s in plan.steps] == ["make check"]


class TestUsesPlaywright:
    def test_plain_playwright_dependency(self):
        assert uses_playwright({"dependencies": {"playwright": "1.0"}}) is True

    def test_optional_dependency(self):
        assert uses_playwright({"optionalDependencies": {"@playwright/test": "1.0"}}) is True

    def test_no_playwright(self):
        assert uses_playwright({"devDependencies": {"vitest": "1.0"}}) is False

    def test_null_sections(self):
        assert uses_playwright({"dependencies": None}) is False

    def test_non_object_sections(self):
        assert uses_playwright({"devDependencies": ["playwright"], "dependencies": 3}) is False


class TestRunTestPlan:
    def test_returns_combined_output(self, fake_runner, tmp_path):
        _write_package(tmp_path, scripts={"test": "vitest run"})
        fake_runner.respond("npm ci", stdout="added 10 packages\n")
        fake_runner.respond("npm test", stdout="5 passed\n", stderr="warn: slow\n")

        output = run_test_plan(fake_runner, tmp_path, detect_test_plan(tmp_path))

        assert output == "added 10 packages\n5 passed\nwarn: slow\n"
        assert fake_runner.command_lines == ["npm ci", "npm test"]

    def test_install_failure_stops_run(self, fake_runner, tmp_path):
        _write_package(tmp_path, scripts={"test": "vitest run"})
        fake_runner.respond("npm ci", stderr="npm ERR! lockfile mismatch\n", exit_code=1)

        with pytest.raises(CommandFailed) as exc_info:
            run_test_plan(fake_runner, tmp_path, detect_test_plan(tmp_path))

        assert "lockfile mismatch" in exc_info.value.output
        assert fake_runner.command_lines == ["npm ci"]

    def test_failure_output_includes_earlier_steps(self, fake_runner, tmp_path):
        _write_package(tmp_path, scripts={"test": "vitest run"})
        fake_runner.respond("npm ci", stdout="installed\n")
        fake_runner.respond("npm test", stdout="1 failed\n", exit_code=1)

        with pytest.raises(CommandFailed) as exc_info:
            run_test_plan(fake_runner, tmp_path, detect_test_plan(tmp_path))

        assert exc_info.value.output == "installed\n1 failed\n"
        assert exc_info.value.cmd == "npm"
        assert exc_info.value.args_list == ["test"]
