"""Domain models for the dispatch layer.

These pydantic models are the data contract shared by the classifier,
the approval gate and the orchestrator.
"""

from .approvals import (
    ApprovalItem,
    ApprovalStatus,
    GateDecision,
    GateResult,
    ResolveDecision,
    ResolveResult,
    Role,
    format_approval_id,
    utc_timestamp,
)
from .audit import AuditLevel, AuditLogEntry
from .routing import UNCLASSIFIED_INTENT, ClassificationRequest, ModelTier, RoutingDecision
from .tasks import OrchestratorResult, SubTask, WorkerResult

__all__ = [
    # Approvals
    "ApprovalItem",
    "ApprovalStatus",
    "GateDecision",
    "GateResult",
    "ResolveDecision",
    "ResolveResult",
    "Role",
    "format_approval_id",
    "utc_timestamp",
    # Audit
    "AuditLevel",
    "AuditLogEntry",
    # Routing
    "UNCLASSIFIED_INTENT",
    "ClassificationRequest",
    "ModelTier",
    "RoutingDecision",
    # Tasks
    "OrchestratorResult",
    "SubTask",
    "WorkerResult",
]
