"""Run session — everything one run owns, created and torn down with it."""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable

from reactloop.agent.memory import MemoryEntry, MemoryLog
from reactloop.agent.options import RunOptions
from reactloop.llm.provider import ChatProvider
from reactloop.session.wire import EventType, Wire

logger = logging.getLogger(__name__)


class LoopState(enum.Enum):
    """Where a run is in the think/act cycle."""

    THINKING = "thinking"
    ACTING = "acting"
    COMPLETE = "complete"  # terminal: reasoning declared the task done
    EXHAUSTED = "exhausted"  # terminal: step budget ran out

    @property
    def terminal(self) -> bool:
        return self in (LoopState.COMPLETE, LoopState.EXHAUSTED)


_TRANSITIONS: dict[LoopState, frozenset[LoopState]] = {
    LoopState.THINKING: frozenset(
        {LoopState.ACTING, LoopState.COMPLETE, LoopState.EXHAUSTED}
    ),
    LoopState.ACTING: frozenset({LoopState.THINKING}),
    LoopState.COMPLETE: frozenset(),
    LoopState.EXHAUSTED: frozenset(),
}


@dataclass(frozen=True)
class AgentResult:
    """Final outcome of a run."""

    result: str
    steps: int
    memory: tuple[MemoryEntry, ...]
    state: LoopState = LoopState.COMPLETE

    @property
    def completed(self) -> bool:
        return self.state is LoopState.COMPLETE

    def to_dict(self) -> dict[str, Any]:
        return {
            "result": self.result,
            "steps": self.steps,
            "memory": [entry.to_dict() for entry in self.memory],
        }


class RunSession:
    """State owned by exactly one run.

    Holds the memory log, the step counter, the loop state, the optional
    event wire, and (in model mode) the provider. Nothing here is shared
    with another run; ``close()`` releases the provider and closes the
    wire.
    """

    def __init__(
        self,
        task: str,
        options: RunOptions,
        wire: Wire | None = None,
        provider_factory: Callable[[RunOptions], ChatProvider] | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex[:8]
        self.task = task
        self.options = options
        self.wire = wire
        self.memory = MemoryLog()
        self.step = 0
        self.state = LoopState.THINKING
        self._provider_factory = provider_factory
        self._provider: ChatProvider | None = None
        self._closed = False

    def emit(self, type: EventType, **data: Any) -> None:
        if self.wire is not None:
            self.wire.emit(type, session=self.id, **data)

    def transition(self, new_state: LoopState) -> None:
        """Move to ``new_state``; illegal moves are a bug in the loop."""
        if new_state is self.state:
            return
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal transition {self.state.name} -> {new_state.name}")
        logger.debug("Session %s: %s -> %s", self.id, self.state.name, new_state.name)
        self.state = new_state

    def provider(self) -> ChatProvider | None:
        """The run's model provider, created on first use."""
        if self._provider is None and self._provider_factory is not None:
            self._provider = self._provider_factory(self.options)
        return self._provider

    def result(self, text: str, steps: int | None = None) -> AgentResult:
        return AgentResult(
            result=text,
            steps=self.step if steps is None else steps,
            memory=self.memory.entries(),
            state=self.state,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._provider = None
        self.emit(EventType.RUN_END, state=self.state.value, steps=self.step)
        if self.wire is not None:
            self.wire.close()

    @property
    def closed(self) -> bool:
        return self._closed
