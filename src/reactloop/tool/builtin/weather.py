"""Weather tool — simulated conditions for a location."""

from __future__ import annotations

import asyncio
import random
from typing import ClassVar

from pydantic import BaseModel

from reactloop.tool.base import Action, BaseTool, ToolInput, ToolOk, ToolResult

CONDITIONS = ("sunny", "cloudy", "rainy", "snowy", "windy")
TEMPERATURES_F = range(50, 80)


class WeatherTool(BaseTool[ToolInput]):
    """Report simulated weather for a location.

    There is no weather backend; the condition and temperature are drawn
    from ``rng`` after ``delay`` seconds of simulated latency.
    """

    name: ClassVar[Action] = Action.CHECK_WEATHER
    description: ClassVar[str] = "Check the weather; input is a place name or location."
    param_model: ClassVar[type[BaseModel]] = ToolInput

    def __init__(self, rng: random.Random | None = None, delay: float = 1.0) -> None:
        self._rng = rng or random.Random()
        self._delay = delay

    async def execute(self, params: ToolInput) -> ToolResult:
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        condition = self._rng.choice(CONDITIONS)
        temperature = self._rng.choice(TEMPERATURES_F)
        return ToolOk(
            output=(
                f"The weather in {params.input} is currently {condition} "
                f"with a temperature of {temperature}°F."
            )
        )
