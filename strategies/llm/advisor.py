"""Free-text strategy hints from an external text model.

The advisor is strictly advisory: it reads a snapshot of one seat's view of
the game and returns a sentence or two of advice. It never touches game
state, and any failure (no API key, network error, timeout) turns into
``UNAVAILABLE_MESSAGE``.
"""

from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING, Any, Callable

from strategies.llm.base import LLMProvider, ProviderConfig

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from sevens_engine.state import GameState

UNAVAILABLE_MESSAGE = "Strategy hints are unavailable right now."
EMPTY_RESPONSE_MESSAGE = "The strategist had nothing to suggest."

DEFAULT_TIMEOUT = 15.0

ADVISOR_RULES = """You are an expert card game strategist.
Game rules:
1. Goal: lowest score. You may knock when your hand is worth 5 points or fewer.
2. Sevens start the board runs, one per suit.
3. Build on runs one step at a time (if the Heart run is 6-8, play Heart 5 or 9).
4. Three of a kind can be melded to remove them from your hand.
5. End your turn by drawing and discarding one card.
6. Wild cards are worth 30, sevens 15, face cards 10. Holding a real card
   that a played wild has impersonated costs an extra 30."""

Backend = Callable[[str], str]


def snapshot(state: GameState, player_index: int) -> dict[str, Any]:
    """What ``player_index`` can see: own hand, the board and the deck size."""
    player = state.players[player_index]
    return {
        "hand": [str(c) for c in player.hand],
        "hand_points": player.hand_points,
        "board": {
            suit.name: [seq.low, seq.high]
            for suit, seq in state.board.items()
            if seq.has_seven
        },
        "declared_wilds": [
            f"{d.rank.symbol}{d.suit.symbol}" for d in state.joker_declarations
        ],
        "deck_size": len(state.deck),
        "phase": state.phase.name,
    }


def build_prompt(view: dict[str, Any]) -> str:
    """Render a snapshot into the prompt sent to the model."""
    board = " | ".join(f"{suit}: {low}-{high}" for suit, (low, high) in view["board"].items())
    lines = [
        ADVISOR_RULES,
        "",
        f"Current hand: {', '.join(view['hand']) or 'empty'}",
        f"Hand points: {view['hand_points']}",
        f"Board: {board or 'empty'}",
        f"Wilds declared as: {', '.join(view['declared_wilds']) or 'none'}",
        f"Cards left in deck: {view['deck_size']}",
        f"Phase: {view['phase']}",
        "",
        "Suggest the best move in at most two sentences.",
        "Prioritise getting rid of high-value cards. If points are 5 or fewer, suggest knocking.",
    ]
    return "\n".join(lines)


def provider_from_env(config: ProviderConfig | None = None) -> LLMProvider | None:
    """Pick a provider based on which API key is present, if any."""
    if os.environ.get("ANTHROPIC_API_KEY"):
        from strategies.llm.anthropic_provider import AnthropicProvider
        return AnthropicProvider(config)
    if os.environ.get("OPENROUTER_API_KEY"):
        from strategies.llm.openrouter_provider import OpenRouterProvider
        return OpenRouterProvider(config)
    return None


class StrategyAdvisor:
    """Turns a game snapshot into a hint, never raising.

    Args:
        backend: An ``LLMProvider``, a plain ``str -> str`` callable, or None
            when no advisory service is configured.
        model: Model name or alias passed to a provider backend.
        timeout: Seconds to wait for a hint before giving up.
    """

    def __init__(
        self,
        backend: LLMProvider | Backend | None = None,
        model: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._backend = backend
        self._model = model
        self._timeout = timeout

    @classmethod
    def from_env(cls, model: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> StrategyAdvisor:
        """Advisor backed by whichever provider has an API key set."""
        provider = provider_from_env(ProviderConfig(timeout=timeout))
        if provider is None:
            logger.info("No advisory API key configured; hints disabled")
        return cls(provider, model=model, timeout=timeout)

    @property
    def is_configured(self) -> bool:
        if self._backend is None:
            return False
        if isinstance(self._backend, LLMProvider):
            return self._backend.is_available()
        return True

    def _ask(self, prompt: str) -> str:
        backend = self._backend
        if isinstance(backend, LLMProvider):
            response = backend.complete(prompt, model=self._model)
            return response.content
        return backend(prompt)

    def _finish(self, text: str | None) -> str:
        text = (text or "").strip()
        return text or EMPTY_RESPONSE_MESSAGE

    def suggest(self, state: GameState, player_index: int) -> str:
        """Ask for a hint, waiting at most ``timeout`` seconds."""
        if not self.is_configured:
            return UNAVAILABLE_MESSAGE

        prompt = build_prompt(snapshot(state, player_index))
        # One worker per request: a hung call must not hold up later hints
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="advisor")
        future = executor.submit(self._ask, prompt)
        try:
            return self._finish(future.result(timeout=self._timeout))
        except FutureTimeoutError:
            logger.warning(f"Advisory request timed out after {self._timeout}s")
            return UNAVAILABLE_MESSAGE
        except Exception as e:
            logger.warning(f"Advisory request failed: {e}")
            return UNAVAILABLE_MESSAGE
        finally:
            executor.shutdown(wait=False)

    async def suggest_async(self, state: GameState, player_index: int) -> str:
        """Ask for a hint without blocking the event loop."""
        if not self.is_configured:
            return UNAVAILABLE_MESSAGE

        prompt = build_prompt(snapshot(state, player_index))
        try:
            text = await asyncio.wait_for(asyncio.to_thread(self._ask, prompt), self._timeout)
            return self._finish(text)
        except asyncio.TimeoutError:
            logger.warning(f"Advisory request timed out after {self._timeout}s")
            return UNAVAILABLE_MESSAGE
        except Exception as e:
            logger.warning(f"Advisory request failed: {e}")
            return UNAVAILABLE_MESSAGE
