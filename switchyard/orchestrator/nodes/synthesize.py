"""Synthesize node.

Makes at most one capable-tier call per job, and none when every worker
failed.
"""

import logging
from typing import Any

from ...core.audit import AuditLog
from ...core.domain.audit import AuditLevel
from ...core.domain.tasks import WorkerResult
from ...core.errors import LLMError
from ...llm.base import LLMProvider
from ..base import NodeFunction
from ..prompts import SYNTHESIS_PROMPT, build_synthesis_message, format_worker_outputs
from ..state import OrchestratorState, Stage

logger = logging.getLogger(__name__)

COMPONENT = "orchestrator"
ALL_FAILED_SUMMARY = "All workers failed - no results to synthesize."


class SynthesizeNode(NodeFunction):
    """Merges worker outputs into one answer."""

    def __init__(self, capable: LLMProvider, audit: AuditLog):
        self.capable = capable
        self.audit = audit

    @property
    def name(self) -> str:
        return Stage.SYNTHESIZE.value

    async def __call__(self, state: OrchestratorState) -> dict[str, Any]:
        summary = await self.synthesize(state["task"], state.get("results", []))
        return {"summary": summary}

    async def synthesize(self, task: str, results: list[WorkerResult]) -> str:
        if not any(r.success for r in results):
            return ALL_FAILED_SUMMARY

        try:
            summary = await self.capable.complete(
                SYNTHESIS_PROMPT, build_synthesis_message(task, results), max_tokens=2048
            )
        except LLMError as e:
            summary = ""
            self.audit.record(
                COMPONENT, "synthesize", "failed",
                level=AuditLevel.WARN,
                model=self.capable.model_name,
                escalated=True,
                note=str(e)[:120],
            )

        if summary.strip():
            return summary.strip()

        # Fallback: labeled concatenation of worker outputs
        return format_worker_outputs(results)
