"""Hints from models hosted on OpenRouter, over its chat-completions HTTP API."""

from __future__ import annotations

from typing import Any

import httpx

from strategies.llm.base import LLMProvider


class OpenRouterProvider(LLMProvider):
    """OpenRouter's OpenAI-compatible endpoint via ``httpx``. Reads ``OPENROUTER_API_KEY``."""

    BASE_URL = "https://openrouter.ai/api/v1"

    name = "openrouter"
    api_key_env = "OPENROUTER_API_KEY"
    models = {
        "gemini-flash": "google/gemini-2.0-flash-001",
        "llama-3.3-70b": "meta-llama/llama-3.3-70b-instruct",
        "qwen2.5-72b": "qwen/qwen-2.5-72b-instruct",
        "claude-haiku": "anthropic/claude-3.5-haiku",
    }
    default_alias = "gemini-flash"

    def _create_client(self, api_key: str) -> httpx.Client:
        return httpx.Client(
            base_url=self.config.base_url or self.BASE_URL,
            headers={"Authorization": f"Bearer {api_key}", "X-Title": "Sevens"},
            timeout=self.config.timeout,
        )

    def _send(self, client: httpx.Client, prompt: str, model: str) -> tuple[str, int, int, Any]:
        response = client.post(
            "/chat/completions",
            json={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
            },
        )
        response.raise_for_status()
        body = response.json()

        usage = body.get("usage") or {}
        text = body["choices"][0]["message"]["content"] or ""
        return text, usage.get("prompt_tokens", 0), usage.get("completion_tokens", 0), body
