"""Approval gate.

Every action that needs clearance passes through `ApprovalGate.gate`. The
permission matrix lives in the PolicyEngine; the gate applies it, queues
undecidable requests for the owner and manages the approve/deny lifecycle.
"""

import logging
from typing import Any

from ..core.audit import AuditLog
from ..core.domain.approvals import (
    ApprovalItem,
    ApprovalStatus,
    GateDecision,
    GateResult,
    ResolveResult,
    Role,
    utc_timestamp,
)
from ..core.domain.audit import AuditLevel
from ..core.domain.routing import RoutingDecision
from ..core.errors import NotificationError, RequestValidationError
from ..policy.engine import PolicyEngine, serialize_payload
from .notifier import LoggingNotifier, Notifier
from .stores.base import ApprovalStore, inline

logger = logging.getLogger(__name__)

COMPONENT = "gate"
PAYLOAD_SUMMARY_LIMIT = 120

_RESOLUTIONS = {
    "approve": (ApprovalStatus.APPROVED, AuditLevel.APPROVE),
    "deny": (ApprovalStatus.DENIED, AuditLevel.DENY),
}


def summarize_payload(payload: Any) -> str:
    """One-line payload description, truncated for the queue record."""
    return inline(serialize_payload(payload))[:PAYLOAD_SUMMARY_LIMIT]


class ApprovalGate:
    """Role/danger permission checks and the pending approval queue."""

    def __init__(
        self,
        store: ApprovalStore,
        policy: PolicyEngine,
        audit: AuditLog,
        notifier: Notifier | None = None,
    ):
        self.store = store
        self.policy = policy
        self.audit = audit
        self.notifier = notifier or LoggingNotifier()

    async def gate(
        self,
        requesting_handler: str = "unknown",
        action: str = "",
        requester_role: str = Role.AGENT.value,
        payload: Any = None,
        reason: str = "",
    ) -> GateResult:
        """Decide whether an action may proceed.

        Args:
            requesting_handler: Handler asking to perform the action
            action: Action name, checked against the danger rules
            requester_role: OWNER, ADMIN or AGENT
            payload: Action payload, also checked against the danger rules
            reason: Why the action is requested

        Returns:
            approved (release_to set), denied, or queued (approval_id set)

        Raises:
            RequestValidationError: If action is empty
        """
        if not action or not action.strip():
            raise RequestValidationError("action is required")

        gated = self._is_gated(requesting_handler, action, payload)
        return await self._decide(
            requesting_handler, action, self._role(requester_role), payload, reason, gated
        )

    async def gate_routing(
        self,
        decision: RoutingDecision,
        requester_role: str,
        payload: Any = None,
        reason: str = "",
    ) -> GateResult:
        """Gate the action described by a classifier decision."""
        gated = decision.requires_approval or self._is_gated(
            decision.target_handler, decision.intent, payload
        )
        return await self._decide(
            decision.target_handler,
            decision.intent,
            self._role(requester_role),
            payload,
            reason or decision.reason,
            gated,
        )

    def resolve(
        self,
        approval_id: str,
        decision: str,
        resolved_by: str = Role.OWNER.value,
        note: str = "",
    ) -> ResolveResult:
        """Apply the single PENDING to APPROVED/DENIED transition.

        A second resolve on the same id always fails and leaves the item
        unchanged.

        Raises:
            RequestValidationError: If decision is not approve or deny
        """
        if decision not in _RESOLUTIONS:
            raise RequestValidationError('decision must be "approve" or "deny"')

        approval_id = approval_id.strip().upper()
        item = self.store.get(approval_id)
        if item is None:
            return ResolveResult(ok=False, id=approval_id, error=f"No approval found with ID {approval_id}")
        if not item.is_pending:
            return ResolveResult(
                ok=False, id=approval_id, error=f"{approval_id} is already {item.status.value}"
            )

        status, level = _RESOLUTIONS[decision]
        updated = self.store.resolve(
            approval_id,
            status,
            resolved_at=utc_timestamp(),
            resolved_by=resolved_by,
            note=note or "none",
        )
        if not updated:
            # Resolved between the read and the write.
            current = self.store.get(approval_id)
            current_status = current.status.value if current else "missing"
            return ResolveResult(
                ok=False, id=approval_id, error=f"{approval_id} is already {current_status}"
            )

        self.audit.record(
            COMPONENT, f"resolve-{decision}", "success",
            level=level,
            requester_role=resolved_by,
            note=f"id={approval_id} agent={item.requesting_handler} action={item.action}",
        )
        return ResolveResult(ok=True, id=approval_id, decision=decision)

    def get_pending(self) -> list[ApprovalItem]:
        return self.store.list_pending()

    def get(self, approval_id: str) -> ApprovalItem | None:
        return self.store.get(approval_id.strip().upper())

    def list_items(self) -> list[ApprovalItem]:
        return self.store.list_items()

    def export_markdown(self) -> str:
        return self.store.export_markdown()

    def _is_gated(self, requesting_handler: str, action: str, payload: Any) -> bool:
        return (
            self.policy.is_dangerous(action, payload)
            or self.policy.handler_always_gated(requesting_handler)
        )

    @staticmethod
    def _role(requester_role: Any) -> str:
        if isinstance(requester_role, Role):
            return requester_role.value
        return str(requester_role or Role.AGENT.value).strip().upper()

    async def _decide(
        self,
        handler: str,
        action: str,
        role: str,
        payload: Any,
        reason: str,
        gated: bool,
    ) -> GateResult:
        verdict = self.policy.evaluate_permission(role, gated)
        subject = f"agent={handler} action={action}"

        if verdict.decision == GateDecision.APPROVED:
            self.audit.record(
                COMPONENT, "gate", "auto-approved",
                level=AuditLevel.APPROVE,
                requester_role=role,
                note=f"{subject} gated={str(gated).lower()}",
            )
            return GateResult(decision=verdict.decision, reason=verdict.reason, release_to=handler)

        if verdict.decision == GateDecision.DENIED:
            self.audit.record(
                COMPONENT, "gate", "denied",
                level=AuditLevel.DENY,
                requester_role=role,
                note=f"{subject} reason={verdict.reason}",
            )
            return GateResult(decision=verdict.decision, reason=verdict.reason)

        item = ApprovalItem(
            id=self.store.next_id(),
            requesting_handler=handler,
            action=action,
            requester_role=role,
            payload_summary=summarize_payload(payload),
            reason=inline(reason),
        )
        self.store.append(item)
        self.audit.record(
            COMPONENT, "gate", "queued",
            level=AuditLevel.BLOCK,
            requester_role=role,
            note=f"id={item.id} {subject} gated={str(gated).lower()}",
        )
        await self._notify(item)

        return GateResult(decision=verdict.decision, reason=verdict.reason, approval_id=item.id)

    async def _notify(self, item: ApprovalItem) -> None:
        try:
            await self.notifier.notify(item)
        except NotificationError as e:
            logger.warning(f"Approval notification failed for {item.id}: {e}")
        except Exception as e:
            logger.warning(f"Unexpected notifier error for {item.id}: {e}")
