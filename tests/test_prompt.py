"""Tests for reactloop.agent.prompt and reactloop.agent.thought."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from reactloop.agent.prompt import build_prompt, extract_json_object
from reactloop.agent.thought import ModelThought, Thought
from reactloop.errors import ThoughtParseError


# ---------------------------------------------------------------------------
# Thought invariants
# ---------------------------------------------------------------------------


class TestThought:
    def test_complete_requires_result(self) -> None:
        with pytest.raises(ValidationError):
            Thought(reasoning="done", is_complete=True)

    def test_incomplete_requires_action_and_input(self) -> None:
        with pytest.raises(ValidationError):
            Thought(reasoning="hmm", action="search")
        with pytest.raises(ValidationError):
            Thought(reasoning="hmm", action_input="pasta")

    def test_complete_ignores_action(self) -> None:
        t = Thought(reasoning="r", is_complete=True, result="42", action="bogus")
        assert t.is_complete
        assert t.result == "42"

    def test_constructors(self) -> None:
        act = Thought.act("r", "search", "pasta")
        assert act.action == "search"
        assert act.is_complete is False
        assert act.source == "rules"
        done = Thought.complete("r", "ok", source="model")
        assert done.result == "ok"
        assert done.source == "model"

    def test_frozen(self) -> None:
        t = Thought.complete("r", "ok")
        with pytest.raises(ValidationError):
            t.result = "changed"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# ModelThought schema
# ---------------------------------------------------------------------------


class TestModelThought:
    def test_camel_case_fields(self) -> None:
        mt = ModelThought.model_validate(
            {"reasoning": "r", "action": "search", "actionInput": "x", "isComplete": False}
        )
        assert mt.action_input == "x"
        assert mt.is_complete is False

    def test_is_complete_required(self) -> None:
        with pytest.raises(ValidationError):
            ModelThought.model_validate({"reasoning": "r", "action": "search"})

    def test_no_coercion(self) -> None:
        with pytest.raises(ValidationError):
            ModelThought.model_validate({"isComplete": "false"})
        with pytest.raises(ValidationError):
            ModelThought.model_validate({"isComplete": False, "actionInput": 42})

    def test_extra_fields_ignored(self) -> None:
        mt = ModelThought.model_validate({"isComplete": True, "result": "r", "confidence": 0.9})
        assert mt.result == "r"


# ---------------------------------------------------------------------------
# build_prompt
# ---------------------------------------------------------------------------


class TestBuildPrompt:
    def test_contains_observation_and_tools(self) -> None:
        prompt = build_prompt(
            "Initial task: weather in Oslo",
            "- checkWeather: weather\n- search: search",
            ["checkWeather", "search"],
        )
        assert "Current observation: Initial task: weather in Oslo" in prompt
        assert "- checkWeather: weather" in prompt
        assert "exactly one of: checkWeather, search" in prompt
        assert '"isComplete"' in prompt


# ---------------------------------------------------------------------------
# extract_json_object
# ---------------------------------------------------------------------------


class TestExtractJsonObject:
    def test_plain_object(self) -> None:
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_surrounded_by_prose(self) -> None:
        text = 'Sure! Here you go:\n```json\n{"a": {"b": 2}}\n```\nHope that helps {:'
        assert extract_json_object(text) == {"a": {"b": 2}}

    def test_braces_inside_strings(self) -> None:
        text = '{"reasoning": "use {curly} braces \\" and }", "isComplete": true}'
        assert extract_json_object(text) == {
            "reasoning": 'use {curly} braces " and }',
            "isComplete": True,
        }

    def test_first_object_wins(self) -> None:
        assert extract_json_object('{"n": 1} then {"n": 2}') == {"n": 1}

    def test_skips_unparseable_candidate(self) -> None:
        assert extract_json_object('{not json} {"ok": true}') == {"ok": True}

    def test_no_object(self) -> None:
        with pytest.raises(ThoughtParseError, match="No JSON object"):
            extract_json_object("I think we should search.")

    def test_unbalanced(self) -> None:
        with pytest.raises(ThoughtParseError):
            extract_json_object('{"a": 1')
