"""Thought models: one reasoning step's verdict and the model-output schema."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, model_validator

ThoughtSource = Literal["rules", "model", "fallback", "corrected"]


class Thought(BaseModel):
    """Rationale, chosen action (if any), and completion verdict.

    A complete thought carries a ``result``; its action fields are ignored.
    An incomplete thought must carry both ``action`` and ``action_input``.
    """

    model_config = ConfigDict(frozen=True)

    reasoning: str = ""
    action: str | None = None
    action_input: str | None = None
    is_complete: bool = False
    result: str | None = None
    source: ThoughtSource = "rules"

    @model_validator(mode="after")
    def _check_shape(self) -> Thought:
        if self.is_complete:
            if self.result is None:
                raise ValueError("a complete thought needs a result")
        elif self.action is None or self.action_input is None:
            raise ValueError("an incomplete thought needs action and action_input")
        return self

    @classmethod
    def act(
        cls, reasoning: str, action: str, action_input: str, source: ThoughtSource = "rules"
    ) -> Thought:
        return cls(
            reasoning=reasoning,
            action=action,
            action_input=action_input,
            is_complete=False,
            source=source,
        )

    @classmethod
    def complete(cls, reasoning: str, result: str, source: ThoughtSource = "rules") -> Thought:
        return cls(reasoning=reasoning, is_complete=True, result=result, source=source)


class ModelThought(BaseModel):
    """Strict schema for the JSON object a model is asked to emit.

    Field names follow the prompt (camelCase). No type coercion: a model
    that answers ``"isComplete": "no"`` is rejected, not reinterpreted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    reasoning: StrictStr = ""
    action: StrictStr | None = None
    action_input: StrictStr | None = Field(default=None, alias="actionInput")
    is_complete: StrictBool = Field(alias="isComplete")
    result: StrictStr | None = None
