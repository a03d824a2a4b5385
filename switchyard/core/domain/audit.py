"""Audit log entry model."""

from enum import Enum

from pydantic import BaseModel, Field

from .approvals import utc_timestamp


class AuditLevel(str, Enum):
    """Levels written to the audit log."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    APPROVE = "APPROVE"
    DENY = "DENY"
    BLOCK = "BLOCK"


class AuditLogEntry(BaseModel):
    """One append-only audit record."""

    timestamp: str = Field(default_factory=utc_timestamp)
    level: AuditLevel = AuditLevel.INFO
    component: str
    action: str
    outcome: str
    model_used: str = "none"
    requester_role: str = "system"
    escalated: bool = False
    note: str = ""

    def to_line(self) -> str:
        """Render in the one-line audit format."""
        note = " ".join(self.note.split()).replace('"', "'")
        return (
            f"[{self.level.value}] {self.timestamp}"
            f" | agent={self.component}"
            f" | action={self.action}"
            f" | user_role={self.requester_role}"
            f" | model={self.model_used}"
            f" | outcome={self.outcome}"
            f" | escalated={'true' if self.escalated else 'false'}"
            f' | note="{note}"'
        )
