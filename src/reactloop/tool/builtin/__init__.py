"""Built-in tools: weather, search, calculator."""

from reactloop.tool.builtin.calculator import CalculatorTool
from reactloop.tool.builtin.search import SearchTool
from reactloop.tool.builtin.weather import WeatherTool

__all__ = [
    "CalculatorTool",
    "SearchTool",
    "WeatherTool",
]
