"""Base reviewer implementing the Template Method pattern.

Every provider follows the same sequence:
    complete() → _call_api()   ← only this differs per provider
               → fall back to the default text on an empty result

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response

API errors propagate unchanged. The run does not retry transport failures;
the only second call is the deliberate re-prompt in reviewer.generate_review.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from review_agent_core.providers.responses import DEFAULT_REVIEW_TEXT

logger = logging.getLogger(__name__)

_MAX_TOKENS = 800


class BaseReviewer(ABC):
    MODEL: str = ""
    MAX_TOKENS: int = _MAX_TOKENS

    def __init__(self, model: str | None = None, max_tokens: int | None = None):
        self.model = model or self.MODEL
        self.max_tokens = max_tokens or self.MAX_TOKENS

    def complete(self, prompt: str, default: str = DEFAULT_REVIEW_TEXT) -> str:
        """Submit prompt and return the review text, or default if the reply is empty."""
        logger.debug("%s: sending %d-character prompt to %s", self.__class__.__name__, len(prompt), self.model)
        text = self._call_api(prompt)
        if not text or not text.strip():
            logger.warning("%s returned no text; using default review text.", self.__class__.__name__)
            return default
        return text.strip()

    @abstractmethod
    def _call_api(self, prompt: str) -> str:
        """Make a single API call and return the raw text response."""
