"""The core agent loop — think, act, observe, repeat."""

from __future__ import annotations

import logging

from reactloop.agent.memory import MemoryEntry
from reactloop.agent.options import RunOptions
from reactloop.agent.reasoning import INITIAL_PREFIX, ReasoningEngine
from reactloop.agent.session import AgentResult, LoopState, RunSession
from reactloop.agent.thought import Thought
from reactloop.errors import ConfigurationError
from reactloop.session.wire import EventType, Wire
from reactloop.tool.registry import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10
EXHAUSTED_RESULT = "Task not completed within max steps"


class AgentLoop:
    """Bounded ReAct loop over a fixed tool registry.

    The registry is frozen on construction; concurrent ``run`` calls on one
    loop share it and the (stateless) reasoning engine, and nothing else.

    Raises:
        ConfigurationError: If the registry is empty or ``max_steps`` is
            not positive.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        engine: ReasoningEngine | None = None,
        max_steps: int = DEFAULT_MAX_STEPS,
    ) -> None:
        if max_steps <= 0:
            raise ConfigurationError(f"max_steps must be positive, got {max_steps}")
        if len(registry) == 0:
            raise ConfigurationError("Tool registry is empty")

        registry.freeze()
        self.registry = registry
        self.engine = engine or ReasoningEngine(registry)
        self.max_steps = max_steps

    async def run(
        self,
        task: str,
        options: RunOptions | None = None,
        wire: Wire | None = None,
    ) -> AgentResult:
        """Run the loop on ``task`` until completion or step exhaustion.

        Always returns an AgentResult; failed actions become error entries
        in memory and feed the next thinking step.

        Args:
            task: The task description.
            options: Reasoning mode and model settings.
            wire: Optional event wire; closed when the run ends.
        """
        options = options or RunOptions()
        session = RunSession(
            task,
            options,
            wire=wire,
            provider_factory=self.engine.make_provider if options.use_model_reasoning else None,
        )
        try:
            return await self._run(session)
        finally:
            session.close()

    async def _run(self, session: RunSession) -> AgentResult:
        logger.info("Agent started on task: %s", session.task)
        session.emit(
            EventType.RUN_BEGIN,
            task=session.task,
            max_steps=self.max_steps,
            mode="model" if session.options.use_model_reasoning else "rules",
        )

        observation = f"{INITIAL_PREFIX}{session.task}"

        while session.step < self.max_steps:
            session.step += 1
            step_no = session.step
            logger.info("Step %d/%d", step_no, self.max_steps)
            session.emit(EventType.STEP_BEGIN, step=step_no)

            # Think
            thought = await self._think(observation, session)
            logger.debug("Thought: %s", thought.reasoning)
            session.emit(
                EventType.THOUGHT, step=step_no, reasoning=thought.reasoning, source=thought.source
            )

            if thought.is_complete:
                session.transition(LoopState.COMPLETE)
                logger.info("Task complete after %d steps", step_no)
                session.emit(EventType.COMPLETE, step=step_no, result=thought.result)
                return session.result(thought.result or "")

            # Act
            session.transition(LoopState.ACTING)
            action = thought.action or ""
            action_input = thought.action_input or ""
            session.emit(EventType.ACTION, step=step_no, action=action, input=action_input)

            try:
                output = await self.registry.dispatch(action, action_input)
            except Exception as e:
                observation = f"Error: {str(e) or type(e).__name__}"
                logger.warning("Step %d: action %s failed: %s", step_no, action, observation)
                session.memory.append(
                    MemoryEntry.failure(step_no, thought.reasoning, action, action_input, observation)
                )
                session.emit(EventType.ERROR, step=step_no, action=action, error=observation)
            else:
                # Observe
                observation = f"Action {action} returned: {output}"
                logger.debug("Observation: %s", observation)
                session.memory.append(
                    MemoryEntry.success(
                        step_no, thought.reasoning, action, action_input, observation
                    )
                )
                session.emit(
                    EventType.OBSERVATION, step=step_no, action=action, observation=observation
                )

            session.transition(LoopState.THINKING)

        session.transition(LoopState.EXHAUSTED)
        logger.warning("Max steps (%d) reached without completing the task", self.max_steps)
        session.emit(EventType.EXHAUSTED, steps=self.max_steps)
        return session.result(EXHAUSTED_RESULT, steps=self.max_steps)

    async def _think(self, observation: str, session: RunSession) -> Thought:
        if not session.options.use_model_reasoning:
            return self.engine.think(observation, session.memory)

        try:
            provider = session.provider()
        except Exception as e:
            thought = self.engine.fallback(
                observation, session.memory, f"{type(e).__name__}: {e}"
            )
        else:
            thought = await self.engine.llm_think(
                observation, session.memory, session.options, provider=provider
            )
        if thought.source == "fallback":
            session.emit(EventType.FALLBACK, step=session.step, reasoning=thought.reasoning)
        return thought
