"""Local Ollama provider (free tier)."""

import logging

import httpx
import ollama

from ..core.errors import LLMError
from .base import LLMProvider

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """Chat completions against a local Ollama server.

    No retries: an unreachable local model is a signal to escalate, not to
    wait.
    """

    def __init__(self, host: str, model: str, timeout: float = 30.0, num_ctx: int = 8192):
        self.host = host
        self.model = model
        self.num_ctx = num_ctx
        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def model_name(self) -> str:
        return self.model

    async def complete(self, system: str, user: str, max_tokens: int = 512) -> str:
        try:
            response = await self.client.chat(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                options={"num_ctx": self.num_ctx, "num_predict": max_tokens},
            )
        except ollama.ResponseError as e:
            logger.warning(f"Ollama error {e.status_code}: {e.error}")
            raise LLMError(f"Ollama error: {e.error}") from e
        except (httpx.HTTPError, ConnectionError) as e:
            logger.warning(f"Ollama not reachable at {self.host}: {e}")
            raise LLMError(f"Ollama not reachable: {e}") from e

        content = (response["message"]["content"] or "").strip()
        if not content:
            raise LLMError("Ollama returned an empty reply")
        return content
