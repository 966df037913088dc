"""Base tool classes with Pydantic input validation."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel, Field

from reactloop.errors import ToolExecutionError, UnknownActionError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Action(str, enum.Enum):
    """The closed set of actions the loop may dispatch."""

    CHECK_WEATHER = "checkWeather"
    CALCULATE = "calculate"
    SEARCH = "search"

    @classmethod
    def parse(cls, name: str) -> Action:
        """Look up an action by its wire name, raising UnknownActionError."""
        try:
            return cls(name)
        except ValueError:
            raise UnknownActionError(name) from None

    @classmethod
    def names(cls) -> list[str]:
        return [a.value for a in cls]


@dataclass
class ToolResult:
    """Base result from a tool execution."""

    output: str = ""
    is_error: bool = False


@dataclass
class ToolOk(ToolResult):
    """Successful tool result."""

    is_error: bool = False


@dataclass
class ToolError(ToolResult):
    """Failed tool result."""

    is_error: bool = True


class ToolInput(BaseModel):
    """Every capability takes one free-text input."""

    input: str = Field(description="Free-text input for the action.")


class BaseTool(ABC, Generic[T]):
    """Base class for all tools.

    A tool is a named asynchronous capability: text in, text out.
    Each tool declares its input as a Pydantic model (the type parameter T)
    and its name as a member of the closed ``Action`` enum.

    Usage:
        class EchoTool(BaseTool[ToolInput]):
            name = Action.SEARCH
            description = "Echo the query back"
            param_model = ToolInput

            async def execute(self, params: ToolInput) -> ToolResult:
                return ToolOk(output=params.input)
    """

    name: ClassVar[Action]
    description: ClassVar[str]
    param_model: ClassVar[type[BaseModel]] = ToolInput

    async def __call__(self, text: str) -> str:
        """Validate input, execute, and return the output text.

        Raises:
            ToolExecutionError: If the input is invalid or the tool
                returned a ``ToolError``.

        Exceptions raised inside ``execute`` propagate unchanged; the
        agent loop records them as error entries.
        """
        try:
            params = self.param_model.model_validate({"input": text})
        except Exception as e:
            raise ToolExecutionError(self.name.value, f"Invalid input: {e}") from e

        result = await self.execute(params)  # type: ignore[arg-type]
        if result.is_error:
            logger.debug("Tool %s reported error: %s", self.name.value, result.output)
            raise ToolExecutionError(self.name.value, result.output)
        return result.output

    @abstractmethod
    async def execute(self, params: T) -> ToolResult:
        """Execute the tool with validated parameters."""
        ...

    def describe(self) -> str:
        """One-line description for prompts: ``- name: description``."""
        return f"- {self.name.value}: {self.description}"
