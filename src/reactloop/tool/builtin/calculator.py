"""Calculator tool — arithmetic over the four basic operators."""

from __future__ import annotations

import re
from typing import ClassVar

from pydantic import BaseModel

from reactloop.errors import ArithmeticSyntaxError
from reactloop.tool.arith import evaluate
from reactloop.tool.base import Action, BaseTool, ToolError, ToolInput, ToolOk, ToolResult

_NON_ARITH_RE = re.compile(r"[^0-9+\-*/().]")


def extract_expression(text: str) -> str:
    """Drop everything that is not a digit, operator, parenthesis, or dot."""
    return _NON_ARITH_RE.sub("", text)


class CalculatorTool(BaseTool[ToolInput]):
    """Evaluate the arithmetic found in free text.

    "Calculate 125 * 37 - 42" is reduced to ``125*37-42`` and evaluated
    with the arithmetic parser in ``reactloop.tool.arith``.
    """

    name: ClassVar[Action] = Action.CALCULATE
    description: ClassVar[str] = "Arithmetic calculation; input is the expression."
    param_model: ClassVar[type[BaseModel]] = ToolInput

    async def execute(self, params: ToolInput) -> ToolResult:
        expression = extract_expression(params.input)
        try:
            value = evaluate(expression)
            # int -> str conversion is capped by sys.get_int_max_str_digits()
            text = str(value)
        except (ArithmeticSyntaxError, ValueError) as e:
            return ToolError(output=f'Could not calculate "{expression}": {e}')
        return ToolOk(output=f"The result of {expression} is {text}")
