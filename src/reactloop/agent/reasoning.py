"""Reasoning engine — turns an observation into the next Thought.

Two strategies share the ``(observation, memory) -> Thought`` contract:

* ``think``: keyword rules, pure and deterministic.
* ``llm_think``: asks a model for a JSON thought, validates it against a
  strict schema and the action whitelist, and falls back to ``think``
  whenever the model cannot be reached or its answer cannot be parsed.

Which one runs is decided by ``RunOptions.use_model_reasoning``.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from pydantic import ValidationError

from reactloop.agent.memory import MemoryLog
from reactloop.agent.options import RunOptions
from reactloop.agent.prompt import build_prompt, extract_json_object
from reactloop.agent.thought import ModelThought, Thought
from reactloop.llm.provider import ChatProvider, create_provider
from reactloop.tool.base import Action
from reactloop.tool.registry import ToolRegistry

logger = logging.getLogger(__name__)

INITIAL_PREFIX = "Initial task: "
NO_RESULTS_MARKER = "No results found"
DEFAULT_LOCATION = "current location"
COULD_NOT_COMPLETE = "I couldn't complete the task with the available information and tools."

CALCULATION_KEYWORDS = ("calculate", "math", "compute")
SEARCH_KEYWORDS = ("search", "find", "look up")

_ARITH_CHAR_RE = re.compile(r"[0-9+\-*/()]")
_SEARCH_KEYWORD_RE = re.compile(r"search|find|look up", re.IGNORECASE)

ProviderFactory = Callable[..., ChatProvider]


def returned_prefix(action: Action) -> str:
    return f"Action {action.value} returned: "


class ReasoningEngine:
    """Produces Thoughts from Observations.

    The model-backed strategy only ever proposes actions registered in
    ``registry`` at construction time.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        provider_factory: ProviderFactory = create_provider,
    ) -> None:
        self.action_names: list[str] = registry.names()
        self.tool_list: str = registry.describe()
        self.provider_factory = provider_factory

    def make_provider(self, options: RunOptions) -> ChatProvider:
        return self.provider_factory(
            model=options.model,
            temperature=options.temperature,
            max_tokens=options.max_tokens,
            base_url=options.base_url,
        )

    # ------------------------------------------------------------------
    # Rule-based strategy
    # ------------------------------------------------------------------

    def think(self, observation: str, memory: MemoryLog | None = None) -> Thought:
        """Decide the next step from keyword rules. No I/O, no randomness."""
        if "Initial task:" in observation:
            return self._classify_task(observation.replace(INITIAL_PREFIX, "", 1))

        for action in (Action.CHECK_WEATHER, Action.CALCULATE):
            prefix = returned_prefix(action)
            if prefix.rstrip() in observation:
                noun = "weather information" if action is Action.CHECK_WEATHER else "calculation"
                return Thought.complete(
                    reasoning=f"I've retrieved the {noun}. The task is complete.",
                    result=observation.replace(prefix, "", 1),
                )

        search_prefix = returned_prefix(Action.SEARCH)
        if search_prefix.rstrip() in observation:
            search_result = observation.replace(search_prefix, "", 1)
            first = memory.first() if memory is not None else None
            if NO_RESULTS_MARKER in search_result and first is not None:
                # Always the first entry, whatever action it recorded.
                narrowed = " ".join(first.action_input.split(" ")[:2])
                return Thought.act(
                    reasoning=(
                        "The search didn't yield useful results. "
                        "Let me try a more general search."
                    ),
                    action=Action.SEARCH.value,
                    action_input=narrowed,
                )
            return Thought.complete(
                reasoning="I've found information through search. The task is complete.",
                result=search_result,
            )

        return Thought.complete(
            reasoning="I'm not sure how to proceed. Let me end the task with what I know so far.",
            result=COULD_NOT_COMPLETE,
        )

    def _classify_task(self, task: str) -> Thought:
        if "weather" in task:
            _, found, after = task.partition("in")
            return Thought.act(
                reasoning="This is a weather-related query. I should check the weather.",
                action=Action.CHECK_WEATHER.value,
                action_input=after.strip() if found else DEFAULT_LOCATION,
            )

        if any(k in task for k in CALCULATION_KEYWORDS) or _ARITH_CHAR_RE.search(task):
            return Thought.act(
                reasoning=(
                    "This appears to be a calculation task. "
                    "I should use the calculator tool."
                ),
                action=Action.CALCULATE.value,
                action_input=task,
            )

        if any(k in task for k in SEARCH_KEYWORDS):
            return Thought.act(
                reasoning="This is a search query. I should search for information.",
                action=Action.SEARCH.value,
                action_input=_SEARCH_KEYWORD_RE.sub("", task).strip(),
            )

        return Thought.act(
            reasoning=(
                "I'm not sure how to handle this task directly. "
                "Let me search for information."
            ),
            action=Action.SEARCH.value,
            action_input=task,
        )

    # ------------------------------------------------------------------
    # Model-backed strategy
    # ------------------------------------------------------------------

    async def llm_think(
        self,
        observation: str,
        memory: MemoryLog | None = None,
        options: RunOptions | None = None,
        provider: ChatProvider | None = None,
    ) -> Thought:
        """Ask the model for the next step.

        The raw output is untrusted: it must contain a JSON object matching
        ``ModelThought``, and an incomplete thought must name a whitelisted
        action. Provider errors and unparseable output fall back to
        ``think`` for this observation; unknown actions are replaced by a
        search over the observation.
        """
        options = options or RunOptions()
        prompt = build_prompt(observation, self.tool_list, self.action_names)

        try:
            if provider is None:
                provider = self.make_provider(options)
            raw = await provider.complete(prompt, options.system_prompt)
            logger.debug("Model output: %s", raw)
            parsed = ModelThought.model_validate(extract_json_object(raw))
        except Exception as e:
            return self.fallback(observation, memory, f"{type(e).__name__}: {e}")

        if not parsed.is_complete and parsed.action not in self.action_names:
            logger.warning("Model proposed unknown action %r, using search", parsed.action)
            return Thought.act(
                reasoning=(
                    f"Model returned unknown action {parsed.action!r}; "
                    f"falling back to search. {parsed.reasoning}"
                ).rstrip(),
                action=Action.SEARCH.value,
                action_input=observation,
                source="corrected",
            )

        try:
            return Thought(
                reasoning=parsed.reasoning,
                action=parsed.action,
                action_input=parsed.action_input,
                is_complete=parsed.is_complete,
                result=parsed.result,
                source="model",
            )
        except ValidationError as e:
            return self.fallback(observation, memory, f"invalid thought: {e}")

    def fallback(self, observation: str, memory: MemoryLog | None, reason: str) -> Thought:
        """Rule-based thought for ``observation``, marked as a model fallback."""
        logger.warning("Model reasoning failed, falling back to rules: %s", reason)
        thought = self.think(observation, memory)
        return thought.model_copy(
            update={
                "reasoning": (
                    f"{thought.reasoning} "
                    f"[Model reasoning failed, fell back to local rules: {reason}]"
                ),
                "source": "fallback",
            }
        )
