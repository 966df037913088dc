"""Tool system — actions, base classes, registry, built-in tools."""

from __future__ import annotations

from reactloop.tool.base import Action, BaseTool, ToolError, ToolInput, ToolOk, ToolResult
from reactloop.tool.builtin import CalculatorTool, SearchTool, WeatherTool
from reactloop.tool.registry import ToolRegistry


def default_registry(delay: float = 1.0) -> ToolRegistry:
    """A registry with the three built-in tools.

    ``delay`` scales the simulated latency of the weather and search tools.
    """
    return ToolRegistry(
        [
            WeatherTool(delay=delay),
            CalculatorTool(),
            SearchTool(delay=delay * 1.5),
        ]
    )


__all__ = [
    "Action",
    "BaseTool",
    "ToolError",
    "ToolInput",
    "ToolOk",
    "ToolResult",
    "ToolRegistry",
    "CalculatorTool",
    "SearchTool",
    "WeatherTool",
    "default_registry",
]
