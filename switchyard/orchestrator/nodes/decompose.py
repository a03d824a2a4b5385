"""Decompose node.

Splits a task into independent sub-tasks, either from an explicit worker
list or by asking the planner models (cheap tier first, then the capable
tier).
"""

import logging
from typing import Any

from pydantic import ValidationError

from ...core.audit import AuditLog
from ...core.domain.audit import AuditLevel
from ...core.domain.tasks import SubTask
from ...core.errors import EscalationExhausted
from ...core.escalation import EscalationStep, escalate
from ...llm.base import LLMProvider
from ...llm.parsing import extract_json_array
from ...workers.registry import WorkerRegistry
from ..base import NodeFunction
from ..prompts import DECOMPOSE_PROMPT, build_decompose_message
from ..state import OrchestratorState, Stage

logger = logging.getLogger(__name__)

COMPONENT = "orchestrator"


class DecomposeNode(NodeFunction):
    """Produces the sub-task plan."""

    def __init__(
        self,
        cheap: LLMProvider,
        capable: LLMProvider,
        registry: WorkerRegistry,
        audit: AuditLog,
        max_subtasks: int = 6,
    ):
        self.cheap = cheap
        self.capable = capable
        self.registry = registry
        self.audit = audit
        self.max_subtasks = max_subtasks

    @property
    def name(self) -> str:
        return Stage.DECOMPOSE.value

    async def __call__(self, state: OrchestratorState) -> dict[str, Any]:
        task = state["task"]
        forced = state.get("forced_workers")

        if forced:
            subtasks = self.forced(task, forced)
        else:
            subtasks = await self.plan(task, state.get("context", ""))

        if not subtasks:
            self.audit.record(
                COMPONENT, "decompose", "no-subtasks",
                level=AuditLevel.WARN,
                note=f'task="{task[:80]}"',
            )
        return {"subtasks": subtasks}

    def forced(self, task: str, workers: list[str]) -> list[SubTask]:
        """One sub-task per known worker, skipping the planner."""
        subtasks = []
        for name in workers:
            spec = self.registry.get(name)
            if spec is None:
                logger.info(f"Ignoring unknown forced worker '{name}'")
                continue
            subtasks.append(SubTask(worker=name, label=spec.label, payload={"task": task}))
        return subtasks[: self.max_subtasks]

    async def plan(self, task: str, context: str = "") -> list[SubTask]:
        """Ask the planner models for a plan.

        Returns an empty list when no planner produced a usable array.
        """
        system = DECOMPOSE_PROMPT.format(
            workers=self.registry.describe(), max_subtasks=self.max_subtasks
        )
        user = build_decompose_message(task, context)

        async def ask(provider: LLMProvider) -> list[Any]:
            return extract_json_array(await provider.complete(system, user, max_tokens=1024))

        steps = [
            EscalationStep(name=self.cheap.name, call=lambda: ask(self.cheap), tier="cheap"),
            EscalationStep(name=self.capable.name, call=lambda: ask(self.capable), tier="capable"),
        ]
        try:
            outcome = await escalate(steps)
        except EscalationExhausted as e:
            self.audit.record(
                COMPONENT, "decompose", "parse-failed",
                level=AuditLevel.WARN,
                model=self.capable.model_name,
                escalated=True,
                note=e.last_reason[:80],
            )
            return []

        return self.accept_plan(outcome.value, task)

    def accept_plan(self, entries: list[Any], task: str) -> list[SubTask]:
        """Keep entries that name a registered worker, up to the cap."""
        subtasks = []
        for entry in entries:
            worker = entry.get("worker") if isinstance(entry, dict) else None
            if not isinstance(worker, str) or worker not in self.registry:
                logger.info(f"Discarding plan entry {entry!r}")
                continue

            spec = self.registry.get(worker)
            label = str(entry.get("label") or spec.label)
            payload = entry.get("payload")
            if not isinstance(payload, dict):
                payload = {"task": str(payload) if payload else label or task}
            try:
                subtasks.append(SubTask(worker=spec.name, label=label, payload=payload))
            except ValidationError as e:
                logger.info(f"Discarding invalid plan entry: {e}")

            if len(subtasks) >= self.max_subtasks:
                break
        return subtasks
