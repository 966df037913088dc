"""Search tool — canned results keyed on query keywords."""

from __future__ import annotations

import asyncio
from typing import ClassVar

from pydantic import BaseModel

from reactloop.tool.base import Action, BaseTool, ToolInput, ToolOk, ToolResult

# (keywords, canned result); first match wins
CANNED_RESULTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("weather",),
        "Found information about weather forecasts and meteorology. Weather refers "
        "to the state of the atmosphere, including temperature, humidity, "
        "precipitation, wind, and other factors.",
    ),
    (
        ("recipe", "food", "cook"),
        "Found several recipes and cooking guides. Popular recipes include pasta "
        "carbonara, chicken curry, and chocolate chip cookies.",
    ),
    (
        ("history", "historical"),
        "Found historical information. History is the study of past events, "
        "particularly human affairs.",
    ),
    (
        ("science", "scientific"),
        "Found scientific articles and research papers. Science is a systematic "
        "enterprise that builds and organizes knowledge in the form of testable "
        "explanations and predictions.",
    ),
)


class SearchTool(BaseTool[ToolInput]):
    """Simulated information retrieval."""

    name: ClassVar[Action] = Action.SEARCH
    description: ClassVar[str] = "General information search; input is the search query."
    param_model: ClassVar[type[BaseModel]] = ToolInput

    def __init__(self, delay: float = 1.5) -> None:
        self._delay = delay

    async def execute(self, params: ToolInput) -> ToolResult:
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        query = params.input
        for keywords, result in CANNED_RESULTS:
            if any(k in query for k in keywords):
                return ToolOk(output=result)
        return ToolOk(
            output=(
                f'Found some general information about "{query}", but no specific '
                "details. Try refining your search query."
            )
        )
