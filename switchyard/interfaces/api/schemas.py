"""Request bodies for the HTTP interface.

Required text fields default to empty so that a missing value reaches the
core and is rejected there with a 400 `{"error": ...}` response.
"""

from typing import Any

from pydantic import BaseModel, Field

from ...core.domain.approvals import Role


class ClassifyRequest(BaseModel):
    """POST /classify"""

    source: str = Field(default="api", description="Channel the request arrived on")
    user_role: str = Field(default=Role.AGENT.value, description="Requester role")
    message: str = Field(default="", description="Free-text request to classify")
    context: str | None = Field(None, description="Optional background")


class GateRequest(BaseModel):
    """POST /gate"""

    requesting_agent: str = Field(default="unknown", description="Handler asking to act")
    action: str = Field(default="", description="Action to clear")
    user_role: str = Field(default=Role.AGENT.value, description="Requester role")
    payload: Any = Field(default_factory=dict, description="Action payload")
    reason: str = Field(default="", description="Why the action is requested")


class ResolveRequest(BaseModel):
    """POST /resolve/{id}"""

    decision: str = Field(default="", description='"approve" or "deny"')
    note: str = Field(default="", description="Reviewer note")
    resolved_by: str = Field(default=Role.OWNER.value, description="Reviewer")


class RunRequest(BaseModel):
    """POST /orchestrator/run"""

    task: str = Field(default="", description="Full task description")
    context: str = Field(default="", description="Optional background")
    workers: list[str] | None = Field(None, description="Force these workers, skipping the planner")
    dry_run: bool = Field(default=False, description="Return the plan without executing")
    user_role: str = Field(default=Role.OWNER.value, description="Role used to gate risky sub-tasks")


class PlanRequest(BaseModel):
    """POST /orchestrator/plan"""

    task: str = Field(default="", description="Full task description")
    context: str = Field(default="", description="Optional background")
