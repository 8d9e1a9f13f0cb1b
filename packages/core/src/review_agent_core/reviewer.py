"""Review generation with a single skeptical re-prompt.

A clean first verdict is not accepted at face value: when the model reports
"no issues found", it is asked once more with a shorter, more directive
prompt, and that second answer is final.

    FIRST_PASS ──(matches "no issues found")──► RETRY ──► done
        │
        └──(anything else)──────────────────────────────► done
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field

from review_agent_core.errors import ConfigurationError
from review_agent_core.providers.anthropic import AnthropicReviewer
from review_agent_core.providers.openai import OpenAIReviewer
from review_agent_core.providers.responses import DEFAULT_REVIEW_TEXT

logger = logging.getLogger(__name__)

_NO_ISSUES_RE = re.compile(r"no\s+issues\s+found", re.IGNORECASE)


class ReviewPass(enum.Enum):
    FIRST_PASS = "first_pass"
    RETRY = "retry"


@dataclass
class ReviewResult:
    text: str
    passes: list[ReviewPass] = field(default_factory=list)

    @property
    def retried(self) -> bool:
        return ReviewPass.RETRY in self.passes


def get_reviewer(config: dict):
    """Build the completion client for the configured provider.

    Raises ConfigurationError when the provider's API key is not set.
    """
    model = config.get("model", "openai")
    max_tokens = config.get("max_output_tokens")
    if model == "openai":
        if not config.get("openai_api_key"):
            raise ConfigurationError("OPENAI_API_KEY is not configured. Cannot generate review.")
        return OpenAIReviewer(
            api_key=config["openai_api_key"], model=config.get("openai_model"), max_tokens=max_tokens
        )
    if model == "anthropic":
        if not config.get("anthropic_api_key"):
            raise ConfigurationError("ANTHROPIC_API_KEY is not configured. Cannot generate review.")
        return AnthropicReviewer(
            api_key=config["anthropic_api_key"], model=config.get("anthropic_model"), max_tokens=max_tokens
        )
    raise ConfigurationError(f"Unknown model provider: {model!r}. Choose 'openai' or 'anthropic'.")


def reports_no_issues(text: str) -> bool:
    return bool(_NO_ISSUES_RE.search(text or ""))


def generate_review(reviewer, prompt: str, retry_prompt: str, default: str = DEFAULT_REVIEW_TEXT) -> ReviewResult:
    """Run the first pass and, if it comes back clean, exactly one retry.

    default is the text used when the model returns nothing.
    """
    text = reviewer.complete(prompt, default=default)
    result = ReviewResult(text=text, passes=[ReviewPass.FIRST_PASS])
    if not reports_no_issues(text):
        return result

    logger.info("First pass reported no issues; asking the model to look again.")
    result.text = reviewer.complete(retry_prompt, default=default)
    result.passes.append(ReviewPass.RETRY)
    return result
