"""Worker that answers a sub-task with a model provider."""

import json
from typing import Any

from ..llm.base import LLMProvider


def render_payload(payload: dict[str, Any]) -> str:
    """Plain-text rendering of a sub-task payload for a prompt."""
    task = payload.get("task") or payload.get("query")
    extra = {k: v for k, v in payload.items() if k not in ("task", "query")}
    parts = [str(task)] if task else []
    if extra:
        parts.append(f"Details: {json.dumps(extra, default=str)}")
    return "\n".join(parts) or json.dumps(payload, default=str)


class LLMWorker:
    """Runs a sub-task through a provider under a specialist role prompt."""

    def __init__(self, provider: LLMProvider, role_prompt: str, max_tokens: int = 1024):
        self.provider = provider
        self.role_prompt = role_prompt
        self.max_tokens = max_tokens

    async def __call__(self, payload: dict[str, Any]) -> dict[str, Any]:
        text = await self.provider.complete(
            self.role_prompt, render_payload(payload), max_tokens=self.max_tokens
        )
        return {"output": text, "model": self.provider.model_name}
