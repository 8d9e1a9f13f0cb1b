import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_TRIGGER = "@review-agent: please review this PR"

DEFAULT_CONFIG: dict = {
    "model": "openai",
    "openai_model": "gpt-5",
    "anthropic_model": "claude-sonnet-4-20250514",
    "max_output_tokens": 800,
    "trigger": DEFAULT_TRIGGER,
    # Per-section prompt budgets, in characters.
    "max_diff_chars": 12000,
    "max_test_chars": 8000,
    "max_files_chars": 20000,
    "max_chars_per_file": 6000,
    "include_file_contents": False,
    "diff_context_lines": 3,
    "fetch_depth": 50,
    "work_dir": ".review-agent-work",
    "run_tests": True,
    "require_tests": True,
    "test_command": None,  # e.g. "pytest -q"; None = detect from package.json
    "install_command": None,
    "command_timeout": 1800,
    "exclude": [],  # fnmatch patterns or directory names left out of file contents
    "guidelines": None,  # optional path to extra reviewer guidelines (Markdown)
    "neutral_exit_code": 78,
}

# Environment variables that override model names without touching the file.
_MODEL_ENV_OVERRIDES = {
    "openai_model": "OPENAI_MODEL",
    "anthropic_model": "ANTHROPIC_MODEL",
}


def load_config(config_path: str = ".review-agent.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .review-agent.yml in the current directory
      3. Environment overrides for model names
      4. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "exclude": list(DEFAULT_CONFIG["exclude"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    for key, env_var in _MODEL_ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")

    return config


def load_guidelines(config: dict) -> str:
    """
    Load optional team review guidelines.

    Returns an empty string when ``guidelines`` is not set; the built-in
    reviewer instructions in the prompt apply on their own in that case.
    """
    custom_path = config.get("guidelines")
    if not custom_path:
        return ""
    p = Path(custom_path)
    if not p.exists():
        raise FileNotFoundError(f"Guidelines file not found: {custom_path}")
    return p.read_text()
