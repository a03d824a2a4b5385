"""Factory for creating the model provider tiers."""

from ..core.config import Settings
from .anthropic_provider import AnthropicProvider
from .base import LLMProviders
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider


def build_providers(settings: Settings) -> LLMProviders:
    """Build the local, cheap and capable providers from settings.

    Providers with a missing API key are still created; they raise LLMError
    when called, which the escalation ladders treat as a failed step.
    """
    return LLMProviders(
        local=OllamaProvider(
            host=settings.ollama_host,
            model=settings.ollama_model,
            timeout=settings.llm_timeout_seconds,
        ),
        cheap=OpenAIProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.llm_timeout_seconds,
        ),
        capable=AnthropicProvider(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            timeout=settings.llm_timeout_seconds * 2,
        ),
    )
