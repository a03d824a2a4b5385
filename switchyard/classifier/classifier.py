"""Intent classifier.

Turns free text into a RoutingDecision using a free-first ladder:

1. Keyword table (no model call)
2. Local model, up to `local_attempts` tries, accepted at or above the
   confidence floor
3. High-capability model, no confidence floor

A message containing the ESCALATE marker skips straight to pass 3. Danger
detection runs independently of whichever pass produced the route.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ..core.audit import AuditLog
from ..core.domain.approvals import Role
from ..core.domain.audit import AuditLevel
from ..core.domain.routing import UNCLASSIFIED_INTENT, ClassificationRequest, ModelTier, RoutingDecision
from ..core.errors import EscalationExhausted, RequestValidationError, UnparseableOutputError
from ..core.escalation import EscalationStep, escalate
from ..core.status import StatusBoard
from ..llm.base import LLMProvider
from ..llm.parsing import extract_json_object
from ..policy.engine import PolicyEngine
from ..policy.rules import FALLBACK_POLICY
from .prompts import CLASSIFICATION_PROMPT, build_user_message

logger = logging.getLogger(__name__)

COMPONENT = "classifier"


@dataclass(frozen=True)
class ModelClassification:
    """Validated reply from a model pass."""

    intent: str
    confidence: float
    reason: str
    model: str


def _coerce_confidence(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class Classifier:
    """Routes messages to handlers.

    Transient backend failures and unparseable replies never reach the
    caller; they only move the request up the ladder. If every pass fails
    the caller gets the unknown/unclassified fallback flagged for review.
    """

    def __init__(
        self,
        policy: PolicyEngine,
        local: LLMProvider,
        capable: LLMProvider,
        audit: AuditLog,
        status: StatusBoard | None = None,
        confidence_floor: int = 80,
        local_attempts: int = 2,
    ):
        self.policy = policy
        self.local = local
        self.capable = capable
        self.audit = audit
        self.status = status
        self.confidence_floor = confidence_floor
        self.local_attempts = local_attempts

    async def classify(
        self,
        source: str,
        requester_role: str,
        message: str,
        context: str | None = None,
    ) -> RoutingDecision:
        """Classify a message.

        Args:
            source: Channel the request arrived on
            requester_role: Role of the requester, recorded in the audit log
            message: Free-text request
            context: Optional background for model passes

        Returns:
            Routing decision; never raises for backend failures

        Raises:
            RequestValidationError: If the message is empty
        """
        if not message or not message.strip():
            raise RequestValidationError("Empty message.")

        role = requester_role.value if isinstance(requester_role, Role) else str(requester_role)
        self._report("working")
        try:
            decision = await self._route(message, context)
        finally:
            self._report("idle")

        self._record(decision, role, source)
        return decision

    async def classify_request(self, request: ClassificationRequest) -> RoutingDecision:
        return await self.classify(
            request.source, request.requester_role, request.message, request.context
        )

    async def _route(self, message: str, context: str | None) -> RoutingDecision:
        dangerous = self.policy.is_dangerous(message)
        forced = self.policy.is_forced_escalation(message)

        # Pass 1: keywords
        if not forced:
            match = self.policy.match_keywords(message)
            if match:
                return self._build(
                    intent=f"{match.domain}/unclassified",
                    dangerous=dangerous,
                    model="keyword",
                    tier=ModelTier.FREE,
                    reason=match.reason,
                )

        # Passes 2 and 3
        steps: list[EscalationStep[ModelClassification]] = []
        if not forced:
            for attempt in range(1, self.local_attempts + 1):
                steps.append(EscalationStep(
                    name=f"local-{attempt}",
                    call=lambda: self._ask(self.local, message, context),
                    tier=ModelTier.ESCALATED_1.value,
                    accept=self._accept_confident,
                ))
        steps.append(EscalationStep(
            name="capable",
            call=lambda: self._ask_capable(message, context, forced),
            tier=ModelTier.ESCALATED_2.value,
        ))

        try:
            outcome = await escalate(steps)
        except EscalationExhausted as e:
            logger.warning(f"Classification failed on every pass: {e}")
            return RoutingDecision(
                intent=UNCLASSIFIED_INTENT,
                target_handler=FALLBACK_POLICY.handler,
                model="none",
                model_tier=ModelTier.ESCALATED_2,
                requires_approval=True,
                dangerous=dangerous,
                escalated=True,
                reason=(
                    "unclassifiable after all passes - flagged for OWNER review. "
                    f"Last error: {e.last_reason}"
                ),
            )

        result = outcome.value
        tier = ModelTier(outcome.step.tier)
        return self._build(
            intent=result.intent,
            dangerous=dangerous,
            model=result.model,
            tier=tier,
            reason=result.reason,
        )

    async def _ask(self, provider: LLMProvider, message: str, context: str | None) -> ModelClassification:
        raw = await provider.complete(
            CLASSIFICATION_PROMPT, build_user_message(message, context), max_tokens=256
        )
        parsed = extract_json_object(raw)

        intent = parsed.get("intent")
        if not self.policy.is_valid_intent(intent):
            raise UnparseableOutputError(f"invalid intent {intent!r}")

        return ModelClassification(
            intent=intent.strip(),
            confidence=_coerce_confidence(parsed.get("confidence")),
            reason=str(parsed.get("reason") or ""),
            model=provider.model_name,
        )

    async def _ask_capable(self, message: str, context: str | None, forced: bool) -> ModelClassification:
        self.audit.record(
            COMPONENT, "escalate", "escalating",
            level=AuditLevel.WARN,
            model=self.capable.model_name,
            escalated=True,
            note="forced by marker" if forced else "local passes exhausted",
        )
        return await self._ask(self.capable, message, context)

    def _accept_confident(self, result: ModelClassification) -> str | None:
        if result.confidence < self.confidence_floor:
            return f"low confidence ({result.confidence:g})"
        return None

    def _build(
        self,
        intent: str,
        dangerous: bool,
        model: str,
        tier: ModelTier,
        reason: str,
    ) -> RoutingDecision:
        domain = intent.split("/", 1)[0]
        return RoutingDecision(
            intent=intent,
            target_handler=self.policy.domain_policy(domain).handler,
            model=model,
            model_tier=tier,
            requires_approval=self.policy.requires_approval(domain, dangerous),
            dangerous=dangerous,
            escalated=tier == ModelTier.ESCALATED_2,
            reason=reason,
        )

    def _record(self, decision: RoutingDecision, role: str, source: str) -> None:
        self.audit.record(
            COMPONENT, "route",
            "unclassified" if decision.is_unclassified else "success",
            model=decision.model,
            requester_role=role,
            escalated=decision.escalated,
            note=(
                f"intent={decision.intent} -> agent={decision.target_handler} "
                f"source={source} approval={str(decision.requires_approval).lower()}"
            ),
        )

    def _report(self, status: str) -> None:
        if self.status is not None:
            self.status.set_status(COMPONENT, status)
