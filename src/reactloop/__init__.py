"""reactloop — a bounded reason/act/observe agent loop."""

from reactloop.agent import AgentLoop, AgentResult, LoopState, ReasoningEngine, RunOptions
from reactloop.tool import Action, ToolRegistry, default_registry

__version__ = "0.1.0"

__all__ = [
    "Action",
    "AgentLoop",
    "AgentResult",
    "LoopState",
    "ReasoningEngine",
    "RunOptions",
    "ToolRegistry",
    "default_registry",
]
