"""Anthropic backend: one Messages API call per project."""

import logging
from typing import Any

from anthropic import Anthropic, AnthropicError

from shipwright.errors import GenerationFailed
from shipwright.llm.base import build_generation_prompt

logger = logging.getLogger(__name__)


class ClaudeProvider:
    """Single-shot Claude completion."""

    name = "claude"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-sonnet-20240620",
        max_tokens: int = 4096,
        client: Any = None,
    ):
        self._client = client if client is not None else Anthropic(api_key=api_key)
        self._model = model
        self._max_tokens = max_tokens

    def generate(self, prompt: str) -> str:
        logger.info("Sending prompt to Claude model %s", self._model)
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": build_generation_prompt(prompt)}],
            )
        except AnthropicError as e:
            raise GenerationFailed(f"Anthropic API error: {str(e)[:300]}") from e

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            raise GenerationFailed("Received empty response from Claude API")
        return text
