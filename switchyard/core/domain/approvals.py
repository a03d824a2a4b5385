"""Approval models owned by the approval gate.

An ApprovalItem is created PENDING when the gate cannot decide on its own
and transitions exactly once to APPROVED or DENIED through an explicit
resolve call. Items are never deleted.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

APPROVAL_ID_PREFIX = "APR-"


def utc_timestamp(moment: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_approval_id(number: int) -> str:
    """Format a sequence number as an approval id (APR-0001)."""
    return f"{APPROVAL_ID_PREFIX}{number:04d}"


def approval_number(approval_id: str) -> int:
    """Numeric suffix of an approval id, or 0 if it is not one."""
    if not approval_id.startswith(APPROVAL_ID_PREFIX):
        return 0
    suffix = approval_id[len(APPROVAL_ID_PREFIX):]
    return int(suffix) if suffix.isdigit() else 0


class Role(str, Enum):
    """Requester roles understood by the permission matrix."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    AGENT = "AGENT"


class ApprovalStatus(str, Enum):
    """Lifecycle of a queued approval."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class GateDecision(str, Enum):
    """Outcome of a gate check."""

    APPROVED = "approved"
    DENIED = "denied"
    QUEUED = "queued"


ResolveDecision = Literal["approve", "deny"]


class ApprovalItem(BaseModel):
    """A request waiting for, or resolved by, a human reviewer."""

    id: str = Field(
        ...,
        description="Monotonic approval id (APR-0001)",
        pattern=r"^APR-\d{4,}$"
    )

    created_at: str = Field(
        default_factory=utc_timestamp,
        description="When the item was queued (ISO-8601)"
    )

    status: ApprovalStatus = Field(
        default=ApprovalStatus.PENDING,
        description="Current lifecycle status"
    )

    requesting_handler: str = Field(
        ...,
        description="Handler that asked to perform the action"
    )

    action: str = Field(
        ...,
        description="Action awaiting approval"
    )

    requester_role: str = Field(
        ...,
        description="Role of the requester at gate time"
    )

    payload_summary: str = Field(
        default="",
        description="Truncated description of the action payload"
    )

    reason: str = Field(
        default="",
        description="Why the action was requested"
    )

    resolved_at: str | None = Field(None, description="When the item was resolved")
    resolved_by: str | None = Field(None, description="Who resolved the item")
    resolution_note: str | None = Field(None, description="Reviewer note")

    @property
    def number(self) -> int:
        """Numeric part of the id."""
        return approval_number(self.id)

    @property
    def is_pending(self) -> bool:
        return self.status == ApprovalStatus.PENDING


class GateResult(BaseModel):
    """Response of a gate check."""

    decision: GateDecision
    reason: str
    release_to: str | None = Field(
        None,
        description="Handler cleared to proceed; None unless approved"
    )
    approval_id: str | None = Field(
        None,
        description="Queued item id; set only when the decision is queued"
    )
    logged: bool = True

    @property
    def approved(self) -> bool:
        return self.decision == GateDecision.APPROVED


class ResolveResult(BaseModel):
    """Response of a resolve call."""

    ok: bool
    id: str
    decision: ResolveDecision | None = None
    error: str | None = None

    def to_response(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "decision": self.decision, "id": self.id}
        return {"ok": False, "error": self.error}
