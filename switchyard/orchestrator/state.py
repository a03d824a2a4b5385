"""Orchestrator graph state."""

from enum import Enum
from typing import TypedDict

from ..core.domain.tasks import SubTask, WorkerResult


class Stage(str, Enum):
    """Nodes of the orchestration graph."""

    DECOMPOSE = "decompose"
    DISPATCH = "dispatch"
    SYNTHESIZE = "synthesize"


class OrchestratorState(TypedDict, total=False):
    """State passed between graph nodes.

    Nodes return partial updates; LangGraph merges them into the state.
    """

    task: str
    context: str
    forced_workers: list[str] | None
    dry_run: bool
    requester_role: str
    subtasks: list[SubTask]
    results: list[WorkerResult]
    summary: str
