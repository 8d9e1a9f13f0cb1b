from __future__ import annotations

try:
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]

from review_agent_core.providers.base import BaseReviewer
from review_agent_core.providers.responses import extract_review_text


class OpenAIReviewer(BaseReviewer):
    MODEL = "gpt-5"

    def __init__(self, api_key: str, model: str | None = None, max_tokens: int | None = None):
        super().__init__(model=model, max_tokens=max_tokens)
        if _OpenAI is None:
            raise ImportError(
                "The 'openai' package is required for this provider. Install it with: pip install openai"
            )
        self.client = _OpenAI(api_key=api_key)

    def _call_api(self, prompt: str) -> str:
        response = self.client.responses.create(
            model=self.model,
            input=prompt,
            max_output_tokens=self.max_tokens,
        )
        return extract_review_text(response, default="")
