"""Base model provider interface using strategy pattern."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class LLMProvider(ABC):
    """Abstract base class for chat model providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider identifier (ollama, openai, anthropic)."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Name of the model this provider calls."""
        pass

    @abstractmethod
    async def complete(self, system: str, user: str, max_tokens: int = 512) -> str:
        """Run a single-turn chat completion.

        Args:
            system: System prompt
            user: User message
            max_tokens: Upper bound on generated tokens

        Returns:
            The model's text reply, stripped

        Raises:
            LLMError: If the backend is unreachable, misconfigured or errors
        """
        pass


@dataclass
class LLMProviders:
    """The three cost tiers used by the dispatch layer."""

    local: LLMProvider
    cheap: LLMProvider
    capable: LLMProvider
