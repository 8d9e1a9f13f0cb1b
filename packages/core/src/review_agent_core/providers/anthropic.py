from __future__ import annotations

from review_agent_core.providers.base import BaseReviewer


class AnthropicReviewer(BaseReviewer):
    MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str, model: str | None = None, max_tokens: int | None = None):
        super().__init__(model=model, max_tokens=max_tokens)
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. Install it with: pip install anthropic"
            )
        self.client = Anthropic(api_key=api_key)

    def _call_api(self, prompt: str) -> str:
        response = self.client.messages.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
        )
        # Only text blocks carry review prose; tool-use or thinking blocks are ignored.
        text_blocks = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        return "".join(text_blocks).strip()
