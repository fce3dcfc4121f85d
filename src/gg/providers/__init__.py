"""LLM providers: Anthropic, OpenAI and Ollama behind one interface."""
from typing import Optional

import httpx

from ..errors import ConfigError
from ..models import GGConfig, ProviderName, Secrets
from .anthropic import AnthropicProvider
from .base import Completion, LLMProvider, iter_ndjson, iter_sse_data
from .ollama import OllamaProvider
from .openai import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "Completion",
    "LLMProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "build_provider",
    "iter_ndjson",
    "iter_sse_data",
]


def build_provider(
    config: GGConfig,
    secrets: Secrets,
    provider: Optional[ProviderName] = None,
    client: Optional[httpx.Client] = None,
) -> LLMProvider:
    """Select a provider implementation from config (or an explicit override)."""
    api = config.api
    name = provider or api.provider

    if name == "anthropic":
        return AnthropicProvider(
            api_key=secrets.claude_api_key,
            model=api.claude_model,
            temperature=api.claude_temperature,
            max_tokens=api.max_tokens,
            client=client,
        )

    if name == "openai":
        return OpenAIProvider(
            api_key=secrets.openai_api_key,
            model=api.openai_model,
            temperature=api.claude_temperature,
            max_tokens=api.max_tokens,
            client=client,
        )

    if name == "ollama":
        return OllamaProvider(
            model=api.ollama_model,
            endpoint=api.ollama_url,
            temperature=api.claude_temperature,
            max_tokens=api.max_tokens,
            client=client,
        )

    raise ConfigError(f"Unsupported LLM provider: {name}")
