"""Agent system — thoughts, memory, reasoning, and the loop."""

from reactloop.agent.loop import DEFAULT_MAX_STEPS, EXHAUSTED_RESULT, AgentLoop
from reactloop.agent.memory import MemoryEntry, MemoryLog
from reactloop.agent.options import RunOptions
from reactloop.agent.reasoning import ReasoningEngine
from reactloop.agent.session import AgentResult, LoopState, RunSession
from reactloop.agent.thought import ModelThought, Thought

__all__ = [
    "DEFAULT_MAX_STEPS",
    "EXHAUSTED_RESULT",
    "AgentLoop",
    "AgentResult",
    "LoopState",
    "MemoryEntry",
    "MemoryLog",
    "ModelThought",
    "ReasoningEngine",
    "RunOptions",
    "RunSession",
    "Thought",
]
