"""LLM provider abstraction — unified via litellm.

litellm handles provider-specific details (OpenAI, OpenAI-compatible
servers behind a custom base URL, Anthropic, Gemini, ...) and reads API
keys from environment variables. The agent only needs one thing from a
provider: raw completion text for a single prompt, which it treats as
untrusted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

if TYPE_CHECKING:
    from litellm import ModelResponse

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "openai/gpt-3.5-turbo"


@dataclass
class ProviderConfig:
    """Configuration for an LLM provider."""

    model: str = DEFAULT_MODEL
    temperature: float | None = 0.7
    max_tokens: int | None = 512
    base_url: str | None = None


@runtime_checkable
class ChatProvider(Protocol):
    """Protocol for LLM providers."""

    @property
    def config(self) -> ProviderConfig: ...

    async def complete(self, prompt: str, system: str) -> str:
        """Return the model's raw text for one system + user exchange."""
        ...


# ---------------------------------------------------------------------------
# litellm provider
# ---------------------------------------------------------------------------


@dataclass
class LiteLLMProvider:
    """Unified LLM provider using litellm.

    litellm detects the provider from the model string prefix
    (e.g. "openai/gpt-4o", "anthropic/claude-...") and reads API keys
    from env vars. ``base_url`` points it at an OpenAI-compatible server.
    """

    _config: ProviderConfig

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def complete(self, prompt: str, system: str) -> str:
        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }

        if self._config.temperature is not None:
            kwargs["temperature"] = self._config.temperature

        if self._config.max_tokens is not None:
            kwargs["max_tokens"] = self._config.max_tokens

        if self._config.base_url:
            kwargs["api_base"] = self._config.base_url

        response = await _acompletion_with_retry(**kwargs)
        return _response_text(response)


@retry(
    retry=retry_if_exception_type((ConnectionError, TimeoutError, OSError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=30),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def _acompletion_with_retry(**kwargs: Any) -> ModelResponse:
    """Call litellm.acompletion with retry on transient errors."""
    import litellm

    return await litellm.acompletion(**kwargs)


def _response_text(response: ModelResponse) -> str:
    """Pull the first choice's message content out of a completion response."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise ValueError("Model returned no choices")
    content = getattr(choices[0].message, "content", None)
    if content is None:
        raise ValueError("Model returned an empty message")
    return content.strip()


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_provider(
    model: str | None = None,
    temperature: float | None = 0.7,
    max_tokens: int | None = 512,
    base_url: str | None = None,
) -> ChatProvider:
    """Create a LiteLLM provider.

    Args:
        model: Model name with provider prefix (e.g. "openai/gpt-4o").
            Defaults to ``DEFAULT_MODEL``.
        temperature: Sampling temperature.
        max_tokens: Max output tokens.
        base_url: Optional API base URL for OpenAI-compatible servers.
    """
    config = ProviderConfig(
        model=model or DEFAULT_MODEL,
        temperature=temperature,
        max_tokens=max_tokens,
        base_url=base_url,
    )
    return LiteLLMProvider(_config=config)
