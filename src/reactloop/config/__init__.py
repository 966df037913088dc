"""Configuration — Pydantic models for reactloop settings."""

from __future__ import annotations

import json
import os
from typing import Any

from pydantic import BaseModel, Field

from reactloop.agent.loop import DEFAULT_MAX_STEPS
from reactloop.agent.options import DEFAULT_SYSTEM_PROMPT, RunOptions
from reactloop.llm.provider import DEFAULT_MODEL

_TRUTHY = {"1", "true", "yes", "on"}


class LLMConfig(BaseModel):
    """Model provider configuration.

    Model names use litellm's provider-prefix format ("openai/gpt-4o").
    API keys are read from env vars by litellm (OPENAI_API_KEY, ...).
    """

    model: str = Field(default=DEFAULT_MODEL)
    base_url: str | None = Field(
        default=None, description="API base URL for OpenAI-compatible servers"
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=512)
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT)


class AgentSettings(BaseModel):
    """Agent loop settings."""

    max_steps: int = Field(default=DEFAULT_MAX_STEPS, description="Step budget per run")
    use_model_reasoning: bool = Field(
        default=False, description="Reason with the model instead of local rules"
    )
    tool_delay: float = Field(
        default=1.0, description="Simulated latency of the built-in tools, in seconds"
    )


class ReactLoopConfig(BaseModel):
    """Top-level reactloop configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    agent: AgentSettings = Field(default_factory=AgentSettings)

    def to_run_options(self) -> RunOptions:
        return RunOptions(
            use_model_reasoning=self.agent.use_model_reasoning,
            model=self.llm.model,
            base_url=self.llm.base_url,
            system_prompt=self.llm.system_prompt,
            temperature=self.llm.temperature,
            max_tokens=self.llm.max_tokens,
        )

    @classmethod
    def load(cls, config_path: str | None = None) -> ReactLoopConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Env vars:
            OPENAI_API_KEY         - OpenAI API key (read by litellm automatically)
            OPENAI_API_BASE_URL    - API base URL for the model provider
            REACTLOOP_MODEL        - Model name (litellm format with provider prefix)
            REACTLOOP_TEMPERATURE  - Sampling temperature
            REACTLOOP_MAX_STEPS    - Step budget per run
            REACTLOOP_USE_LLM      - "1"/"true" to reason with the model
        """
        # override=True so an updated .env wins over stale shell exports.
        from dotenv import load_dotenv

        load_dotenv(override=True)

        config_data: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            with open(config_path) as f:
                config_data = json.load(f)

        llm = config_data.get("llm", {})
        agent = config_data.get("agent", {})

        env_model = os.environ.get("REACTLOOP_MODEL")
        if env_model:
            llm["model"] = env_model

        env_base_url = os.environ.get("OPENAI_API_BASE_URL")
        if env_base_url:
            llm["base_url"] = env_base_url

        env_temperature = os.environ.get("REACTLOOP_TEMPERATURE")
        if env_temperature:
            llm["temperature"] = float(env_temperature)

        env_max_steps = os.environ.get("REACTLOOP_MAX_STEPS")
        if env_max_steps:
            agent["max_steps"] = int(env_max_steps)

        env_use_llm = os.environ.get("REACTLOOP_USE_LLM")
        if env_use_llm:
            agent["use_model_reasoning"] = env_use_llm.strip().lower() in _TRUTHY

        if llm:
            config_data["llm"] = llm
        if agent:
            config_data["agent"] = agent

        return cls.model_validate(config_data)
