"""Text-model advisory hints for Sevens.

Supports multiple providers:
- Anthropic (Claude models)
- OpenRouter (Gemini, Llama, Qwen, etc.)
"""

from strategies.llm.base import LLMProvider, LLMResponse, ProviderConfig
from strategies.llm.anthropic_provider import AnthropicProvider
from strategies.llm.openrouter_provider import OpenRouterProvider
from strategies.llm.advisor import (
    UNAVAILABLE_MESSAGE,
    StrategyAdvisor,
    build_prompt,
    provider_from_env,
    snapshot,
)

__all__ = [
    # Base classes
    "LLMProvider",
    "LLMResponse",
    "ProviderConfig",
    # Providers
    "AnthropicProvider",
    "OpenRouterProvider",
    # Advisor
    "StrategyAdvisor",
    "UNAVAILABLE_MESSAGE",
    "build_prompt",
    "provider_from_env",
    "snapshot",
]
