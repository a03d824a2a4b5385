"""Orchestration workflow.

    decompose -> (dry run or empty plan: END) -> dispatch -> synthesize -> END
"""

import logging
import time

from langgraph.graph import END, StateGraph

from ..core.audit import AuditLog
from ..core.domain.approvals import Role
from ..core.domain.tasks import OrchestratorResult
from ..core.errors import RequestValidationError
from ..core.status import StatusBoard
from ..gate.gate import ApprovalGate
from ..llm.base import LLMProviders
from ..policy.engine import PolicyEngine
from ..workers.registry import WorkerRegistry
from .base import WorkflowBase
from .nodes import DecomposeNode, DispatchNode, SynthesizeNode
from .state import OrchestratorState, Stage

logger = logging.getLogger(__name__)

COMPONENT = "orchestrator"
NO_PLAN_SUMMARY = "Could not decompose task into sub-tasks."


class OrchestratorWorkflow(WorkflowBase):
    """LangGraph state machine over the three orchestration nodes."""

    def __init__(self, decompose: DecomposeNode, dispatch: DispatchNode, synthesize: SynthesizeNode):
        super().__init__()
        self.decompose = decompose
        self.dispatch = dispatch
        self.synthesize = synthesize

    def build_graph(self) -> StateGraph:
        workflow = StateGraph(OrchestratorState)

        workflow.add_node(self.decompose.name, self.decompose.__call__)
        workflow.add_node(self.dispatch.name, self.dispatch.__call__)
        workflow.add_node(self.synthesize.name, self.synthesize.__call__)

        workflow.set_entry_point(Stage.DECOMPOSE.value)
        workflow.add_conditional_edges(
            Stage.DECOMPOSE.value,
            self.after_decompose,
            {Stage.DISPATCH.value: Stage.DISPATCH.value, END: END},
        )
        workflow.add_edge(Stage.DISPATCH.value, Stage.SYNTHESIZE.value)
        workflow.add_edge(Stage.SYNTHESIZE.value, END)
        return workflow

    @staticmethod
    def after_decompose(state: OrchestratorState) -> str:
        if state.get("dry_run") or not state.get("subtasks"):
            return END
        return Stage.DISPATCH.value


class Orchestrator:
    """Runs composite tasks across parallel workers.

    Sub-tasks flagged risky are cleared through the approval gate with the
    caller's role before their worker is invoked.
    """

    def __init__(
        self,
        providers: LLMProviders,
        registry: WorkerRegistry,
        gate: ApprovalGate,
        policy: PolicyEngine,
        audit: AuditLog,
        status: StatusBoard | None = None,
        worker_timeout: float = 60.0,
        max_subtasks: int = 6,
    ):
        self.registry = registry
        self.audit = audit
        self.status = status
        self.decompose_node = DecomposeNode(
            providers.cheap, providers.capable, registry, audit, max_subtasks=max_subtasks
        )
        self.dispatch_node = DispatchNode(
            registry, gate, policy, audit, status=status, timeout=worker_timeout
        )
        self.synthesize_node = SynthesizeNode(providers.capable, audit)
        self.workflow = OrchestratorWorkflow(
            self.decompose_node, self.dispatch_node, self.synthesize_node
        )

    async def run(
        self,
        task: str,
        context: str = "",
        forced_workers: list[str] | None = None,
        dry_run: bool = False,
        requester_role: str = Role.OWNER.value,
    ) -> OrchestratorResult:
        """Decompose, dispatch and synthesize a task.

        Args:
            task: Full task description
            context: Optional background for the planner
            forced_workers: Skip the planner and run these workers
            dry_run: Stop after decomposition and return the plan
            requester_role: Role used when gating risky sub-tasks

        Returns:
            Result with a summary in every non-dry-run case

        Raises:
            RequestValidationError: If task is empty
        """
        if not task or not task.strip():
            raise RequestValidationError("task is required")

        role = requester_role.value if isinstance(requester_role, Role) else str(requester_role)
        start = time.monotonic()
        self.audit.record(
            COMPONENT, "start", "running", requester_role=role, note=f'task="{task[:80]}"'
        )
        self._report("working")

        try:
            final = await self.workflow.aexecute({
                "task": task,
                "context": context or "",
                "forced_workers": forced_workers,
                "dry_run": dry_run,
                "requester_role": role,
            })
        finally:
            self._report("idle")

        subtasks = final.get("subtasks", [])
        duration_ms = int((time.monotonic() - start) * 1000)

        if not subtasks:
            return OrchestratorResult(task=task, summary=NO_PLAN_SUMMARY, duration_ms=duration_ms)
        if dry_run:
            return OrchestratorResult(task=task, subtasks=subtasks, dry_run=True)

        results = final.get("results", [])
        workers_ok = sum(1 for r in results if r.success)
        self.audit.record(
            COMPONENT, "complete", "success" if workers_ok else "failed",
            requester_role=role,
            note=(
                f'task="{task[:60]}" workers={len(subtasks)} '
                f"success={workers_ok} duration={duration_ms}ms"
            ),
        )
        return OrchestratorResult(
            task=task,
            subtasks=subtasks,
            results=results,
            summary=final.get("summary", ""),
            workers_run=len(subtasks),
            workers_ok=workers_ok,
            duration_ms=duration_ms,
        )

    async def plan(self, task: str, context: str = "", requester_role: str = Role.OWNER.value) -> OrchestratorResult:
        """Decomposition only; no worker is called."""
        return await self.run(task, context=context, dry_run=True, requester_role=requester_role)

    def _report(self, status: str) -> None:
        if self.status is not None:
            self.status.set_status(COMPONENT, status)
