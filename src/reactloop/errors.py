"""Exception hierarchy for reactloop."""

from __future__ import annotations


class ReactLoopError(Exception):
    """Base class for all reactloop errors."""


class ConfigurationError(ReactLoopError):
    """Structural misconfiguration, raised at construction time."""


class UnknownActionError(ReactLoopError):
    """An action name that is not part of the closed Action set or not registered."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Unknown action: {action}")


class ToolExecutionError(ReactLoopError):
    """A tool reported failure for its input."""

    def __init__(self, tool: str, message: str) -> None:
        self.tool = tool
        super().__init__(message)


class ThoughtParseError(ReactLoopError):
    """Model output could not be turned into a valid Thought."""


class ArithmeticSyntaxError(ReactLoopError):
    """Expression rejected by the arithmetic parser."""
