"""Common plumbing for hosted text-model providers used by the advisor."""

from __future__ import annotations

import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from sevens_engine.errors import AdvisoryUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """One completed request."""
    content: str
    model: str
    latency_ms: float
    input_tokens: int = 0
    output_tokens: int = 0
    raw_response: Any = None


@dataclass
class ProviderConfig:
    """Connection and sampling settings shared by every provider.

    Attributes:
        api_key: Overrides the provider's environment variable.
        base_url: Overrides the provider's default endpoint.
        timeout: Per-request timeout in seconds.
        temperature: Sampling temperature for hints.
        max_tokens: Reply length cap; hints are a sentence or two.
    """
    api_key: str | None = None
    base_url: str | None = None
    timeout: float = 15.0
    temperature: float = 0.3
    max_tokens: int = 200


class LLMProvider(ABC):
    """A hosted model reachable with an API key.

    Subclasses name their key variable and model aliases, build a client
    once, and turn one prompt into an :class:`LLMResponse`.
    """

    name: ClassVar[str]
    api_key_env: ClassVar[str]
    models: ClassVar[dict[str, str]] = {}
    default_alias: ClassVar[str]

    def __init__(self, config: ProviderConfig | None = None):
        self.config = config or ProviderConfig()
        self._client: Any = None

    @property
    def api_key(self) -> str | None:
        return self.config.api_key or os.environ.get(self.api_key_env)

    @property
    def default_model(self) -> str:
        return self.resolve_model(self.default_alias)

    def resolve_model(self, model: str) -> str:
        """Map a short alias to the provider's model id; unknown names pass through."""
        return self.models.get(model.lower(), model)

    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> Any:
        """The provider's client, created on first use."""
        if self._client is None:
            key = self.api_key
            if not key:
                raise AdvisoryUnavailableError(
                    f"{self.api_key_env} is not set; export it or pass api_key in ProviderConfig"
                )
            self._client = self._create_client(key)
        return self._client

    @abstractmethod
    def _create_client(self, api_key: str) -> Any:
        ...

    @abstractmethod
    def _send(self, client: Any, prompt: str, model: str) -> tuple[str, int, int, Any]:
        """Send one prompt and return ``(text, input_tokens, output_tokens, raw)``."""
        ...

    def complete(self, prompt: str, model: str | None = None) -> LLMResponse:
        """Ask ``model`` (an alias or full id, provider default if None) for a reply.

        Raises:
            AdvisoryUnavailableError: If no API key is configured.
        """
        resolved = self.resolve_model(model) if model else self.default_model
        client = self.client

        started = time.perf_counter()
        text, input_tokens, output_tokens, raw = self._send(client, prompt, resolved)
        latency_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"{self.name} {resolved} answered in {latency_ms:.0f}ms")

        return LLMResponse(
            content=text.strip(),
            model=resolved,
            latency_ms=latency_ms,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            raw_response=raw,
        )
