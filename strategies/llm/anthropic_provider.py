"""Hints from Anthropic's Claude models via the official SDK."""

from __future__ import annotations

from typing import Any

import anthropic

from strategies.llm.base import LLMProvider


class AnthropicProvider(LLMProvider):
    """Claude through the ``anthropic`` client. Reads ``ANTHROPIC_API_KEY``."""

    name = "anthropic"
    api_key_env = "ANTHROPIC_API_KEY"
    models = {
        "haiku": "claude-3-5-haiku-latest",
        "sonnet": "claude-sonnet-4-20250514",
    }
    default_alias = "haiku"

    def _create_client(self, api_key: str) -> anthropic.Anthropic:
        return anthropic.Anthropic(
            api_key=api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=0,
        )

    def _send(self, client: anthropic.Anthropic, prompt: str, model: str) -> tuple[str, int, int, Any]:
        message = client.messages.create(
            model=model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(block.text for block in message.content if block.type == "text")
        return text, message.usage.input_tokens, message.usage.output_tokens, message
