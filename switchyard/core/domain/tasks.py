"""Task models used by the orchestrator."""

import json
from typing import Any

from pydantic import BaseModel, Field


class SubTask(BaseModel):
    """One independent unit of work in a decomposition plan."""

    worker: str = Field(
        ...,
        description="Registered worker that executes this sub-task",
        min_length=1
    )

    label: str = Field(
        default="",
        description="Short human-readable description"
    )

    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Worker input"
    )


class WorkerResult(BaseModel):
    """Terminal outcome of one dispatched sub-task. Never retried."""

    worker: str
    label: str
    success: bool
    result: Any | None = None
    error: str | None = None
    duration_ms: int = Field(
        default=0,
        description="Wall-clock time spent on this sub-task"
    )

    def output_text(self, limit: int = 800) -> str:
        """Best textual rendering of the worker output for synthesis."""
        if not self.success:
            return self.error or "unknown error"
        result = self.result
        if isinstance(result, dict):
            for key in ("summary", "output", "draft"):
                if result.get(key):
                    return str(result[key])
        if isinstance(result, str):
            return result
        try:
            return json.dumps(result, default=str)[:limit]
        except (TypeError, ValueError):
            return str(result)[:limit]


class OrchestratorResult(BaseModel):
    """Result of an orchestrated job."""

    task: str
    subtasks: list[SubTask] = Field(default_factory=list)
    results: list[WorkerResult] = Field(default_factory=list)
    summary: str = ""
    workers_run: int = 0
    workers_ok: int = 0
    duration_ms: int = 0
    dry_run: bool = False

    def to_response(self) -> dict[str, Any]:
        """Serialize for callers; dry runs only carry the plan."""
        if self.dry_run:
            return {
                "task": self.task,
                "subtasks": [s.model_dump(mode="json") for s in self.subtasks],
                "dry_run": True,
            }
        return self.model_dump(mode="json", exclude={"dry_run"})
