"""LLM abstraction layer — unified via litellm."""

from reactloop.llm.provider import (
    DEFAULT_MODEL,
    ChatProvider,
    LiteLLMProvider,
    ProviderConfig,
    create_provider,
)

__all__ = [
    "DEFAULT_MODEL",
    "ChatProvider",
    "LiteLLMProvider",
    "ProviderConfig",
    "create_provider",
]
