"""Dispatch node.

Runs every sub-task concurrently, each against its own deadline. Every
sub-task ends in exactly one WorkerResult; a failure or timeout never
affects its siblings.
"""

import asyncio
import logging
import time
from typing import Any

from ...core.audit import AuditLog
from ...core.domain.approvals import GateDecision, Role
from ...core.domain.audit import AuditLevel
from ...core.domain.tasks import SubTask, WorkerResult
from ...core.status import StatusBoard
from ...gate.gate import ApprovalGate
from ...policy.engine import PolicyEngine
from ...workers.registry import WorkerRegistry
from ..base import NodeFunction
from ..state import OrchestratorState, Stage

logger = logging.getLogger(__name__)

COMPONENT = "orchestrator"


class DispatchNode(NodeFunction):
    """Clears risky sub-tasks through the gate and runs the workers."""

    def __init__(
        self,
        registry: WorkerRegistry,
        gate: ApprovalGate,
        policy: PolicyEngine,
        audit: AuditLog,
        status: StatusBoard | None = None,
        timeout: float = 60.0,
    ):
        self.registry = registry
        self.gate = gate
        self.policy = policy
        self.audit = audit
        self.status = status
        self.timeout = timeout

    @property
    def name(self) -> str:
        return Stage.DISPATCH.value

    async def __call__(self, state: OrchestratorState) -> dict[str, Any]:
        results = await self.dispatch(
            state.get("subtasks", []),
            state.get("requester_role", Role.OWNER.value),
        )
        return {"results": results}

    async def dispatch(self, subtasks: list[SubTask], requester_role: str) -> list[WorkerResult]:
        """Run all sub-tasks; results keep the order of `subtasks`."""
        settled = await asyncio.gather(
            *(self.run_one(sub, requester_role) for sub in subtasks),
            return_exceptions=True,
        )

        results = []
        for sub, outcome in zip(subtasks, settled):
            if isinstance(outcome, BaseException):
                outcome = WorkerResult(
                    worker=sub.worker, label=sub.label, success=False, error=str(outcome)
                )
            results.append(outcome)
        return results

    async def run_one(self, sub: SubTask, requester_role: str) -> WorkerResult:
        start = time.monotonic()

        def finish(success: bool, result: Any = None, error: str | None = None) -> WorkerResult:
            return WorkerResult(
                worker=sub.worker,
                label=sub.label,
                success=success,
                result=result,
                error=error,
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        spec = self.registry.get(sub.worker)
        if spec is None:
            return self._failed(finish(False, error=f"Unknown worker {sub.worker}"))

        try:
            blocked = await self.clear(sub, requester_role)
        except Exception as e:
            return self._failed(finish(False, error=f"Approval check failed: {e}"))
        if blocked:
            return self._failed(finish(False, error=blocked))

        self._report(sub.worker, "working", task=sub.label)
        try:
            value = await asyncio.wait_for(spec.run(sub.payload), timeout=self.timeout)
        except asyncio.TimeoutError:
            result = finish(False, error=f"Worker {sub.worker} timed out after {self.timeout:g}s")
        except Exception as e:
            result = finish(False, error=str(e) or e.__class__.__name__)
        else:
            result = finish(True, result=value)

        self._report(sub.worker, "idle" if result.success else "error")
        return result if result.success else self._failed(result)

    async def clear(self, sub: SubTask, requester_role: str) -> str | None:
        """Gate a risky sub-task.

        Returns:
            None when the sub-task may run, otherwise the failure reason
        """
        domain = self.policy.domain_for_handler(sub.worker)
        action = sub.label or sub.worker
        risky = (
            self.policy.is_dangerous(f"{sub.worker} {action}", sub.payload)
            or self.policy.handler_always_gated(sub.worker)
        )
        if not risky:
            return None

        verdict = await self.gate.gate(
            requesting_handler=domain.handler if domain.domain == sub.worker else sub.worker,
            action=action,
            requester_role=requester_role,
            payload=sub.payload,
            reason=f"orchestrated sub-task for worker {sub.worker}",
        )
        if verdict.decision == GateDecision.APPROVED:
            return None
        if verdict.decision == GateDecision.QUEUED:
            return f"awaiting approval {verdict.approval_id}"
        return f"approval denied: {verdict.reason}"

    def _failed(self, result: WorkerResult) -> WorkerResult:
        self.audit.record(
            COMPONENT, "worker", "failed",
            level=AuditLevel.WARN,
            note=f"worker={result.worker} {result.error}",
        )
        return result

    def _report(self, worker: str, status: str, **meta: Any) -> None:
        if self.status is not None:
            self.status.set_status(worker, status, **meta)
