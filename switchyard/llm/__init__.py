"""Model providers for the free, cheap and high-capability tiers."""

from .anthropic_provider import AnthropicProvider
from .base import LLMProvider, LLMProviders
from .factory import build_providers
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider
from .parsing import extract_json_array, extract_json_object

__all__ = [
    "AnthropicProvider",
    "LLMProvider",
    "LLMProviders",
    "OllamaProvider",
    "OpenAIProvider",
    "build_providers",
    "extract_json_array",
    "extract_json_object",
]
