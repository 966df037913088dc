"""Tool registry — register, freeze, and dispatch tools."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import MappingProxyType

from reactloop.errors import UnknownActionError
from reactloop.tool.base import Action, BaseTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of available tools, keyed on ``Action``.

    Names outside the ``Action`` enum are rejected at registration. Once
    frozen (the agent loop freezes the registry it is given) the mapping
    is read-only, so concurrent runs can share it.
    """

    def __init__(self, tools: Iterable[BaseTool] = ()) -> None:
        self._tools: dict[Action, BaseTool] = {}
        self._frozen = False
        self.register_many(tools)

    def register(self, tool: BaseTool) -> None:
        """Register a tool instance."""
        if self._frozen:
            raise RuntimeError("Tool registry is frozen")
        action = Action.parse(getattr(tool, "name", ""))
        if action in self._tools:
            raise ValueError(f"Tool '{action.value}' already registered")
        self._tools[action] = tool
        logger.debug("Registered tool %s", action.value)

    def register_many(self, tools: Iterable[BaseTool]) -> None:
        """Register multiple tools."""
        for tool in tools:
            self.register(tool)

    def freeze(self) -> None:
        """Make the registry immutable."""
        if not self._frozen:
            self._tools = MappingProxyType(dict(self._tools))  # type: ignore[assignment]
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, action: str) -> BaseTool | None:
        """Get a tool by action name."""
        try:
            return self._tools.get(Action(action))
        except ValueError:
            return None

    def actions(self) -> list[Action]:
        """Registered actions, in registration order."""
        return list(self._tools.keys())

    def names(self) -> list[str]:
        """Registered action names."""
        return [a.value for a in self._tools]

    def describe(self) -> str:
        """Tool list for prompts, one ``- name: description`` line per tool."""
        return "\n".join(t.describe() for t in self._tools.values())

    async def dispatch(self, action: str, text: str) -> str:
        """Dispatch an action to its tool.

        Raises:
            UnknownActionError: If the action is not registered.

        Tool failures are not caught here.
        """
        tool = self.get(action)
        if tool is None:
            raise UnknownActionError(action)
        return await tool(text)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, action: object) -> bool:
        if not isinstance(action, str):
            return False
        return self.get(action) is not None
