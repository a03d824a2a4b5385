"""Append-only audit log.

Every routing decision, gate outcome and orchestration step is written as
one line in a flat file that reporting tools read. Writes are best-effort:
a failed append is logged and never raised to the caller.
"""

import logging
from collections import deque
from pathlib import Path

from .domain.audit import AuditLevel, AuditLogEntry

logger = logging.getLogger(__name__)


class AuditLog:
    """Writer for the audit trail.

    Assumes a single writer process; lines are appended without locking.
    """

    def __init__(self, path: Path | None = None, keep_recent: int = 500):
        """Initialize the audit log.

        Args:
            path: File to append to. None keeps entries in memory only.
            keep_recent: How many recent entries to retain for inspection
        """
        self.path = path
        self._recent: deque[AuditLogEntry] = deque(maxlen=keep_recent)
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def record(
        self,
        component: str,
        action: str,
        outcome: str,
        *,
        level: AuditLevel = AuditLevel.INFO,
        model: str = "none",
        requester_role: str = "system",
        escalated: bool = False,
        note: str = "",
    ) -> AuditLogEntry:
        """Append one entry and return it."""
        entry = AuditLogEntry(
            level=level,
            component=component,
            action=action,
            outcome=outcome,
            model_used=model,
            requester_role=requester_role,
            escalated=escalated,
            note=note,
        )
        self.append(entry)
        return entry

    def append(self, entry: AuditLogEntry) -> None:
        line = entry.to_line()
        self._recent.append(entry)

        if entry.level in (AuditLevel.WARN, AuditLevel.ERROR):
            logger.warning(line)
        else:
            logger.debug(line)

        if self.path is None:
            return
        try:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as e:
            logger.warning(f"Audit log write failed ({self.path}): {e}")

    def recent(self, limit: int = 50) -> list[AuditLogEntry]:
        """Most recent entries, newest last."""
        if limit <= 0:
            return []
        return list(self._recent)[-limit:]
