"""Per-run options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI agent."


class RunOptions(BaseModel):
    """Options recognised by ``AgentLoop.run``.

    Accepts both snake_case and the camelCase spellings
    (``useModelReasoning``, ``baseURL``, ``systemPrompt``).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    use_model_reasoning: bool = Field(default=False, alias="useModelReasoning")
    model: str | None = None
    base_url: str | None = Field(default=None, alias="baseURL")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, alias="systemPrompt")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=512, gt=0, alias="maxTokens")
