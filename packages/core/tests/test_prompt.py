"""Tests for prompt assembly."""

from review_agent_core.context import DiffContext
from review_agent_core.gh.pull_request import PullRequestRef
from review_agent_core.prompt import build_prompt, build_retry_prompt


def _ref(**overrides):
    fields = dict(
        number=3,
        head_sha="abc123",
        base_sha="def456",
        head_repo="octo/demo",
        base_repo="octo/demo",
        title="Add upload widget",
        body="Lets users upload avatars.",
        author="octocat",
        labels=["feature", "ui"],
    )
    fields.update(overrides)
    return PullRequestRef(**fields)


def _config(**overrides):
    config = {"max_diff_chars": 12000, "max_test_chars": 8000, "max_files_chars": 20000}
    config.update(overrides)
    return config


class TestBuildPrompt:
    def test_contains_metadata(self):
        prompt = build_prompt(_ref(), DiffContext(diff="+x"), _config())
        assert "PR Title: Add upload widget" in prompt
        assert "PR Author: octocat" in prompt
        assert "PR Labels: feature, ui" in prompt
        assert "PR Description: Lets users upload avatars." in prompt

    def test_placeholders_for_empty_fields(self):
        prompt = build_prompt(_ref(body="", labels=[]), DiffContext(), _config())
        assert "PR Description: (none)" in prompt
        assert "PR Labels: (none)" in prompt
        assert "(no diff)" in prompt

    def test_instructions_prioritize_correctness(self):
        prompt = build_prompt(_ref(), DiffContext(diff="+x"), _config())
        assert "correctness, security and semantic bugs over style" in prompt
        assert "state assumptions instead of asking questions" in prompt

    def test_no_issues_instruction_mentions_tests_only_when_run(self):
        without = build_prompt(_ref(), DiffContext(diff="+x"), _config())
        with_tests = build_prompt(_ref(), DiffContext(diff="+x", test_output="ok", tests_ran=True), _config())
        assert '"No issues found"' in without
        assert "tests passed" not in without
        assert "confirm that tests passed" in with_tests

    def test_section_order(self):
        context = DiffContext(
            diff="DIFF_BODY",
            changed_files={"src/a.js": "FILE_BODY"},
            test_output="TEST_BODY",
            tests_ran=True,
        )
        prompt = build_prompt(_ref(), context, _config(), guidelines="GUIDE_BODY")
        positions = [
            prompt.index("senior code reviewer"),
            prompt.index("GUIDE_BODY"),
            prompt.index("PR Title"),
            prompt.index("FILE_BODY"),
            prompt.index("TEST_BODY"),
            prompt.index("DIFF_BODY"),
        ]
        assert positions == sorted(positions)

    def test_file_section_lists_paths(self):
        context = DiffContext(diff="+x", changed_files={"src/a.js": "a", "src/b.js": "b"})
        prompt = build_prompt(_ref(), context, _config())
        assert "--- src/a.js ---" in prompt
        assert "--- src/b.js ---" in prompt

    def test_sections_truncated_independently(self):
        context = DiffContext(diff="d" * 100, test_output="t" * 10, tests_ran=True)
        prompt = build_prompt(_ref(), context, _config(max_diff_chars=40, max_test_chars=50))
        assert "d" * 40 + "\n... [truncated 60 characters]" in prompt
        assert "d" * 41 not in prompt
        assert "t" * 10 in prompt

    def test_test_section_omitted_when_tests_not_run(self):
        prompt = build_prompt(_ref(), DiffContext(diff="+x"), _config())
        assert "Test Output" not in prompt

    def test_deterministic(self):
        context = DiffContext(diff="+x", changed_files={"a": "1"}, test_output="ok", tests_ran=True)
        assert build_prompt(_ref(), context, _config()) == build_prompt(_ref(), context, _config())


class TestBuildRetryPrompt:
    def test_reuses_context(self):
        context = DiffContext(diff="DIFF_BODY", test_output="TEST_BODY", tests_ran=True)
        prompt = build_retry_prompt(_ref(), context, _config())
        assert "DIFF_BODY" in prompt
        assert "TEST_BODY" in prompt
        assert "reported no issues" in prompt

    def test_shorter_than_primary_prompt(self):
        context = DiffContext(diff="+x")
        assert len(build_retry_prompt(_ref(), context, _config())) < len(build_prompt(_ref(), context, _config()))
