"""Prompt construction and JSON extraction for model-backed reasoning."""

from __future__ import annotations

import json
from typing import Any

from reactloop.errors import ThoughtParseError

EXAMPLE_THOUGHT = """{
  "reasoning": "The user wants the weather in Beijing, so I should check it.",
  "action": "checkWeather",
  "actionInput": "Beijing",
  "isComplete": false
}"""


def build_prompt(observation: str, tool_list: str, action_names: list[str]) -> str:
    """Build the ReAct prompt for one reasoning step.

    Args:
        observation: The current observation text.
        tool_list: One ``- name: description`` line per available action.
        action_names: The whitelist the model must choose from.
    """
    allowed = ", ".join(action_names)
    return "\n".join(
        [
            "You are a ReAct agent.",
            f"Current observation: {observation}",
            "You may only call one of the following tools "
            "(use the action names exactly as written):",
            tool_list,
            "Reply with a single JSON object describing your reasoning, for example:",
            EXAMPLE_THOUGHT,
            'If the task is complete, set "isComplete" to true and give a "result" field.',
            f'Unless the task is complete, "action" must be exactly one of: {allowed}.',
        ]
    )


def _balanced_object_end(text: str, start: int) -> int | None:
    """Index just past the ``}`` matching the ``{`` at ``start``, or None.

    Braces inside JSON string literals are skipped.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first balanced ``{...}`` in ``text`` that parses as a JSON object.

    Models wrap their JSON in prose or markdown fences; everything outside
    the object is ignored.

    Raises:
        ThoughtParseError: If no candidate parses.
    """
    start = text.find("{")
    if start == -1:
        raise ThoughtParseError("No JSON object found in model output")

    last_error = "unbalanced braces"
    while start != -1:
        end = _balanced_object_end(text, start)
        if end is not None:
            try:
                value = json.loads(text[start:end])
            except json.JSONDecodeError as e:
                last_error = str(e)
            else:
                if isinstance(value, dict):
                    return value
        start = text.find("{", start + 1)

    raise ThoughtParseError(f"Could not parse JSON from model output: {last_error}")
