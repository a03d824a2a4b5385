"""Worker that delegates a sub-task to a remote HTTP endpoint."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class HttpWorker:
    """POSTs the sub-task payload as JSON and returns the JSON reply.

    HTTP and transport errors propagate; the orchestrator records them as a
    failed sub-task. The overall deadline is enforced by the orchestrator,
    not here.
    """

    def __init__(self, url: str, timeout: float | None = None):
        self.url = url
        self.timeout = timeout

    async def __call__(self, payload: dict[str, Any]) -> Any:
        async with httpx.AsyncClient() as client:
            response = await client.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()

        try:
            return response.json()
        except ValueError:
            logger.debug(f"Worker at {self.url} returned non-JSON body")
            return {"output": response.text}
