"""Anthropic provider (high-capability tier)."""

import logging

import anthropic
from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..core.errors import LLMError
from .base import LLMProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """Chat completions through Claude.

    Used only where a paid high-capability call is justified: classifier
    escalation, planner fallback and result synthesis.
    """

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-6", timeout: float = 60.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model_name(self) -> str:
        return self.model

    def _build_llm(self, max_tokens: int) -> ChatAnthropic:
        return ChatAnthropic(
            model=self.model,
            api_key=self.api_key,
            max_tokens=max_tokens,
            timeout=self.timeout,
            max_retries=0,
        )

    async def complete(self, system: str, user: str, max_tokens: int = 512) -> str:
        if not self.api_key:
            raise LLMError("ANTHROPIC_API_KEY not set")

        try:
            content = await self._invoke(system, user, max_tokens)
        except anthropic.AnthropicError as e:
            logger.error(f"Anthropic API error: {e}")
            raise LLMError(f"Anthropic API error: {e}") from e

        if not content:
            raise LLMError("Anthropic returned an empty reply")
        return content

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((anthropic.RateLimitError, anthropic.APIConnectionError)),
        reraise=True,
    )
    async def _invoke(self, system: str, user: str, max_tokens: int) -> str:
        """Make the API call with retry on rate limits and connection errors."""
        llm = self._build_llm(max_tokens)
        response = await llm.ainvoke([SystemMessage(content=system), HumanMessage(content=user)])
        content = response.content
        if isinstance(content, list):
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return str(content).strip()
