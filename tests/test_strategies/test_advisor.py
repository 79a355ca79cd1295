"""Tests for the strategy advisor. No test here talks to a real service."""

import asyncio
import json
import threading

import httpx
import pytest

from sevens_engine.board import BoardSequence
from sevens_engine.cards import Rank, Suit
from sevens_engine.config import GameConfig
from sevens_engine.errors import AdvisoryUnavailableError
from sevens_engine.melds import JokerDeclaration
from sevens_engine.state import create_initial_state
from strategies.llm.advisor import (
    EMPTY_RESPONSE_MESSAGE,
    UNAVAILABLE_MESSAGE,
    StrategyAdvisor,
    build_prompt,
    provider_from_env,
    snapshot,
)
from strategies.llm.anthropic_provider import AnthropicProvider
from strategies.llm.base import LLMProvider, ProviderConfig
from strategies.llm.openrouter_provider import OpenRouterProvider


@pytest.fixture
def state():
    state = create_initial_state(GameConfig(player_count=2, seed=3))
    board = dict(state.board)
    board[Suit.HEARTS] = BoardSequence(Suit.HEARTS, low=6, high=9, has_seven=True)
    declaration = JokerDeclaration(card_id="W1-0", suit=Suit.HEARTS, rank=Rank.NINE)
    return state.with_board(board).with_declarations([declaration])


@pytest.fixture
def no_api_keys(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)


class FakeProvider(LLMProvider):
    name = "fake"
    api_key_env = "SEVENS_TEST_FAKE_KEY"
    models = {"small": "fake-model"}
    default_alias = "small"

    def __init__(self, reply="Play your seven.", available=True):
        super().__init__(ProviderConfig(api_key="key" if available else None))
        self.reply = reply
        self.prompts = []

    def _create_client(self, api_key):
        return object()

    def _send(self, client, prompt, model):
        self.prompts.append((prompt, model))
        return self.reply, 10, 5, None


class TestSnapshot:
    def test_only_own_hand(self, state):
        view = snapshot(state, 1)
        assert view["hand"] == [str(c) for c in state.players[1].hand]
        assert view["hand_points"] == state.players[1].hand_points
        assert view["deck_size"] == len(state.deck)
        assert view["phase"] == "ACTION"

    def test_board_and_declarations(self, state):
        view = snapshot(state, 0)
        assert view["board"] == {"HEARTS": [6, 9]}
        assert view["declared_wilds"] == ["9♥"]

    def test_prompt_mentions_state(self, state):
        prompt = build_prompt(snapshot(state, 0))
        assert "HEARTS: 6-9" in prompt
        assert f"Cards left in deck: {len(state.deck)}" in prompt
        assert "knock" in prompt.lower()


class TestStrategyAdvisor:
    def test_unconfigured(self, state):
        advisor = StrategyAdvisor(None)
        assert not advisor.is_configured
        assert advisor.suggest(state, 0) == UNAVAILABLE_MESSAGE

    def test_callable_backend(self, state):
        prompts = []

        def backend(prompt):
            prompts.append(prompt)
            return "  Knock now.  "

        advisor = StrategyAdvisor(backend)
        assert advisor.suggest(state, 0) == "Knock now."
        assert len(prompts) == 1

    def test_empty_reply(self, state):
        advisor = StrategyAdvisor(lambda prompt: "   ")
        assert advisor.suggest(state, 0) == EMPTY_RESPONSE_MESSAGE

    def test_backend_error_falls_back(self, state):
        def backend(prompt):
            raise ConnectionError("unreachable")

        assert StrategyAdvisor(backend).suggest(state, 0) == UNAVAILABLE_MESSAGE

    def test_timeout_falls_back(self, state):
        release = threading.Event()

        def backend(prompt):
            release.wait(2)
            return "too late"

        advisor = StrategyAdvisor(backend, timeout=0.05)
        try:
            assert advisor.suggest(state, 0) == UNAVAILABLE_MESSAGE
        finally:
            release.set()

    def test_hung_requests_do_not_block_later_hints(self, state):
        release = threading.Event()
        calls = []

        def backend(prompt):
            calls.append(prompt)
            if len(calls) <= 3:
                release.wait(2)
                return "too late"
            return "Draw."

        advisor = StrategyAdvisor(backend, timeout=0.2)
        try:
            for _ in range(3):
                assert advisor.suggest(state, 0) == UNAVAILABLE_MESSAGE
            assert advisor.suggest(state, 0) == "Draw."
        finally:
            release.set()

    def test_provider_backend(self, state):
        provider = FakeProvider()
        advisor = StrategyAdvisor(provider)
        assert advisor.suggest(state, 0) == "Play your seven."
        assert provider.prompts[0][1] == "fake-model"

    def test_provider_model_override(self, state):
        provider = FakeProvider()
        StrategyAdvisor(provider, model="other").suggest(state, 0)
        assert provider.prompts[0][1] == "other"

    def test_unavailable_provider(self, state):
        provider = FakeProvider(available=False)
        assert StrategyAdvisor(provider).suggest(state, 0) == UNAVAILABLE_MESSAGE
        assert provider.prompts == []

    def test_async(self, state):
        advisor = StrategyAdvisor(lambda prompt: "Draw.")
        assert asyncio.run(advisor.suggest_async(state, 0)) == "Draw."

    def test_async_timeout(self, state):
        release = threading.Event()

        def backend(prompt):
            release.wait(0.5)
            return "too late"

        advisor = StrategyAdvisor(backend, timeout=0.05)
        try:
            assert asyncio.run(advisor.suggest_async(state, 0)) == UNAVAILABLE_MESSAGE
        finally:
            release.set()


class TestProvidersFromEnv:
    def test_no_keys(self, state, no_api_keys):
        assert provider_from_env() is None
        advisor = StrategyAdvisor.from_env()
        assert not advisor.is_configured
        assert advisor.suggest(state, 0) == UNAVAILABLE_MESSAGE

    def test_anthropic_preferred(self, monkeypatch, no_api_keys):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
        monkeypatch.setenv("OPENROUTER_API_KEY", "other-key")
        assert isinstance(provider_from_env(), AnthropicProvider)

    def test_openrouter(self, monkeypatch, no_api_keys):
        monkeypatch.setenv("OPENROUTER_API_KEY", "other-key")
        assert isinstance(provider_from_env(), OpenRouterProvider)

    def test_anthropic_without_key(self, no_api_keys):
        provider = AnthropicProvider()
        assert not provider.is_available()
        with pytest.raises(AdvisoryUnavailableError):
            provider.complete("hi", model="haiku")


class TestOpenRouterProvider:
    def test_complete(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["path"] = request.url.path
            return httpx.Response(
                200,
                json={
                    "choices": [{"message": {"content": " Start with the seven. "}}],
                    "usage": {"prompt_tokens": 12, "completion_tokens": 4},
                },
            )

        provider = OpenRouterProvider(ProviderConfig(api_key="k"))
        provider._client = httpx.Client(
            base_url=OpenRouterProvider.BASE_URL, transport=httpx.MockTransport(handler)
        )

        response = provider.complete("prompt", model="gemini-flash")
        assert response.content == "Start with the seven."
        assert response.input_tokens == 12
        assert seen["path"].endswith("/chat/completions")
        assert seen["body"]["model"] == "google/gemini-2.0-flash-001"

    def test_http_error_becomes_fallback(self, state):
        provider = OpenRouterProvider(ProviderConfig(api_key="k"))
        provider._client = httpx.Client(
            base_url=OpenRouterProvider.BASE_URL,
            transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )
        assert StrategyAdvisor(provider).suggest(state, 0) == UNAVAILABLE_MESSAGE
