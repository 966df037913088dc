"""Tests for reactloop.agent.reasoning (rule-based and model-backed strategies)."""

from __future__ import annotations

import json
from typing import Any

import pytest

from reactloop.agent.memory import MemoryEntry, MemoryLog
from reactloop.agent.options import RunOptions
from reactloop.agent.reasoning import COULD_NOT_COMPLETE, ReasoningEngine
from reactloop.llm.provider import ProviderConfig
from reactloop.tool import SearchTool, ToolRegistry, default_registry


class FakeProvider:
    """Returns a canned reply (or raises it) and records what it was asked."""

    def __init__(self, reply: str | Exception) -> None:
        self.reply = reply
        self.calls: list[tuple[str, str]] = []
        self._config = ProviderConfig(model="fake/model")

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def complete(self, prompt: str, system: str) -> str:
        self.calls.append((prompt, system))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def _reply(**fields: Any) -> str:
    return json.dumps(fields)


@pytest.fixture
def engine() -> ReasoningEngine:
    return ReasoningEngine(default_registry(delay=0))


# ---------------------------------------------------------------------------
# Rule-based: initial task classification
# ---------------------------------------------------------------------------


class TestThinkInitialTask:
    def test_calculation(self, engine: ReasoningEngine) -> None:
        t = engine.think("Initial task: Calculate 125 * 37 - 42")
        assert t.action == "calculate"
        assert t.action_input == "Calculate 125 * 37 - 42"
        assert t.is_complete is False

    def test_arithmetic_characters_trigger_calculate(self, engine: ReasoningEngine) -> None:
        assert engine.think("Initial task: 2+2").action == "calculate"

    def test_weather_with_location(self, engine: ReasoningEngine) -> None:
        t = engine.think("Initial task: What's the weather in Paris?")
        assert t.action == "checkWeather"
        assert t.action_input == "Paris?"

    def test_weather_without_location(self, engine: ReasoningEngine) -> None:
        t = engine.think("Initial task: weather today?")
        assert t.action == "checkWeather"
        assert t.action_input == "current location"

    def test_weather_beats_calculation(self, engine: ReasoningEngine) -> None:
        t = engine.think("Initial task: weather forecast for 2024")
        assert t.action == "checkWeather"

    def test_search_keywords_stripped(self, engine: ReasoningEngine) -> None:
        t = engine.think("Initial task: find information about pasta")
        assert t.action == "search"
        assert t.action_input == "information about pasta"

    def test_look_up(self, engine: ReasoningEngine) -> None:
        t = engine.think("Initial task: look up Roman history")
        assert t.action == "search"
        assert t.action_input == "Roman history"

    def test_default_search_uses_raw_task(self, engine: ReasoningEngine) -> None:
        t = engine.think("Initial task: Tell me about Rome")
        assert t.action == "search"
        assert t.action_input == "Tell me about Rome"

    def test_deterministic(self, engine: ReasoningEngine) -> None:
        obs = "Initial task: find information about pasta"
        assert engine.think(obs) == engine.think(obs)


# ---------------------------------------------------------------------------
# Rule-based: follow-up observations
# ---------------------------------------------------------------------------


class TestThinkFollowUp:
    def test_weather_result_completes(self, engine: ReasoningEngine) -> None:
        t = engine.think("Action checkWeather returned: Sunny, 70°F.")
        assert t.is_complete
        assert t.result == "Sunny, 70°F."

    def test_calculation_result_completes(self, engine: ReasoningEngine) -> None:
        t = engine.think("Action calculate returned: The result of 125*37-42 is 4583")
        assert t.is_complete
        assert t.result == "The result of 125*37-42 is 4583"

    def test_search_result_completes(self, engine: ReasoningEngine) -> None:
        t = engine.think("Action search returned: Found several recipes.")
        assert t.is_complete
        assert t.result == "Found several recipes."

    def test_search_no_results_narrows_first_entry(self, engine: ReasoningEngine) -> None:
        memory = MemoryLog()
        memory.append(
            MemoryEntry.success(
                1, "t", "search", "information about pasta", "Action search returned: x"
            )
        )
        t = engine.think("Action search returned: No results found.", memory)
        assert t.is_complete is False
        assert t.action == "search"
        assert t.action_input == "information about"

    def test_no_results_reads_first_entry_even_if_stale(self, engine: ReasoningEngine) -> None:
        memory = MemoryLog()
        memory.append(MemoryEntry.failure(1, "t", "calculate", "one two three", "Error: x"))
        memory.append(MemoryEntry.success(2, "t", "search", "pasta", "obs"))
        t = engine.think("Action search returned: No results found", memory)
        assert t.action_input == "one two"

    def test_no_results_without_memory_completes(self, engine: ReasoningEngine) -> None:
        t = engine.think("Action search returned: No results found")
        assert t.is_complete
        assert t.result == "No results found"

    def test_error_observation_gives_up(self, engine: ReasoningEngine) -> None:
        t = engine.think("Error: Unknown action: fly")
        assert t.is_complete
        assert t.result == COULD_NOT_COMPLETE


# ---------------------------------------------------------------------------
# Model-backed
# ---------------------------------------------------------------------------


class TestLLMThink:
    async def test_valid_action(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(
            _reply(reasoning="check it", action="checkWeather", actionInput="Oslo", isComplete=False)
        )
        t = await engine.llm_think("Initial task: weather in Oslo", provider=provider)
        assert t.source == "model"
        assert t.action == "checkWeather"
        assert t.action_input == "Oslo"
        assert t.reasoning == "check it"

    async def test_complete(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(_reply(reasoning="done", isComplete=True, result="It is sunny"))
        t = await engine.llm_think("Action checkWeather returned: sunny", provider=provider)
        assert t.is_complete
        assert t.result == "It is sunny"

    async def test_complete_thought_keeps_unlisted_action(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(
            _reply(reasoning="done", action="shell", isComplete=True, result="It is sunny")
        )
        t = await engine.llm_think("Action checkWeather returned: sunny", provider=provider)
        assert t.source == "model"
        assert t.is_complete
        assert t.result == "It is sunny"

    async def test_json_wrapped_in_prose(self, engine: ReasoningEngine) -> None:
        body = _reply(reasoning="r", action="search", actionInput="pasta", isComplete=False)
        provider = FakeProvider(f"Here is my answer:\n```json\n{body}\n```")
        t = await engine.llm_think("Initial task: pasta", provider=provider)
        assert t.action == "search"

    async def test_unknown_action_corrected_to_search(self, engine: ReasoningEngine) -> None:
        obs = "Initial task: delete everything"
        provider = FakeProvider(
            _reply(reasoning="rm it", action="shell", actionInput="rm -rf /", isComplete=False)
        )
        t = await engine.llm_think(obs, provider=provider)
        assert t.source == "corrected"
        assert t.action == "search"
        assert t.action_input == obs
        assert "'shell'" in t.reasoning

    async def test_missing_action_corrected(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(_reply(reasoning="?", isComplete=False))
        t = await engine.llm_think("Initial task: x", provider=provider)
        assert t.action == "search"
        assert t.source == "corrected"

    async def test_whitelist_is_the_registry(self) -> None:
        engine = ReasoningEngine(ToolRegistry([SearchTool(delay=0)]))
        provider = FakeProvider(
            _reply(reasoning="r", action="calculate", actionInput="1+1", isComplete=False)
        )
        t = await engine.llm_think("Initial task: 1+1", provider=provider)
        assert t.action == "search"
        prompt, _ = provider.calls[0]
        assert "exactly one of: search." in prompt
        assert "- calculate" not in prompt

    async def test_non_json_falls_back_to_rules(self, engine: ReasoningEngine) -> None:
        obs = "Initial task: Calculate 125 * 37 - 42"
        provider = FakeProvider("I would use the calculator for this.")
        t = await engine.llm_think(obs, provider=provider)
        expected = engine.think(obs)
        assert t.source == "fallback"
        assert t.action == expected.action
        assert t.action_input == expected.action_input
        assert t.reasoning.startswith(expected.reasoning)
        assert "Model reasoning failed" in t.reasoning
        assert "No JSON object" in t.reasoning

    async def test_provider_error_falls_back(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(RuntimeError("OPENAI_API_KEY is not set"))
        t = await engine.llm_think("Initial task: weather in Rome", provider=provider)
        assert t.source == "fallback"
        assert t.action == "checkWeather"
        assert "OPENAI_API_KEY is not set" in t.reasoning

    async def test_schema_violation_falls_back(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(_reply(reasoning="r", action="search", isComplete="no"))
        t = await engine.llm_think("Initial task: find pasta", provider=provider)
        assert t.source == "fallback"
        assert t.action_input == "pasta"

    async def test_incomplete_without_input_falls_back(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(_reply(reasoning="r", action="search", isComplete=False))
        t = await engine.llm_think("Initial task: find pasta", provider=provider)
        assert t.source == "fallback"
        assert "invalid thought" in t.reasoning

    async def test_complete_without_result_falls_back(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(_reply(reasoning="done", isComplete=True))
        t = await engine.llm_think("Action calculate returned: 4", provider=provider)
        assert t.source == "fallback"
        assert t.result == "4"

    async def test_system_prompt_forwarded(self, engine: ReasoningEngine) -> None:
        provider = FakeProvider(_reply(isComplete=True, result="ok"))
        await engine.llm_think(
            "Initial task: x", options=RunOptions(system_prompt="Be terse."), provider=provider
        )
        assert provider.calls[0][1] == "Be terse."

    async def test_provider_built_from_options(self) -> None:
        captured: dict[str, Any] = {}
        fake = FakeProvider(_reply(isComplete=True, result="ok"))

        def factory(**kwargs: Any) -> FakeProvider:
            captured.update(kwargs)
            return fake

        engine = ReasoningEngine(default_registry(delay=0), provider_factory=factory)
        options = RunOptions(model="openai/gpt-4o", baseURL="http://localhost:8000/v1")
        t = await engine.llm_think("Initial task: x", options=options)
        assert t.result == "ok"
        assert captured == {
            "model": "openai/gpt-4o",
            "temperature": 0.7,
            "max_tokens": 512,
            "base_url": "http://localhost:8000/v1",
        }

    async def test_factory_error_falls_back(self) -> None:
        def factory(**kwargs: Any) -> FakeProvider:
            raise ValueError("no provider")

        engine = ReasoningEngine(default_registry(delay=0), provider_factory=factory)
        t = await engine.llm_think("Initial task: 2*3")
        assert t.source == "fallback"
        assert t.action == "calculate"
