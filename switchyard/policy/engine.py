"""Policy engine.

Single authority for danger detection, keyword routing, domain gating
defaults and the role/danger permission matrix.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from ..core.domain.approvals import GateDecision, Role
from .rules import (
    DANGER_RULES,
    DOMAIN_POLICIES,
    ESCALATION_MARKER,
    FALLBACK_POLICY,
    INTENT_PATTERN,
    KEYWORD_RULES,
    DangerRule,
    DomainPolicy,
    KeywordRule,
)

logger = logging.getLogger(__name__)

HANDLER_SUFFIX = "-handler"


@dataclass(frozen=True)
class KeywordMatch:
    """Result of the keyword pass."""

    domain: str
    keyword: str

    @property
    def reason(self) -> str:
        return f'keyword match: "{self.keyword}"'


@dataclass(frozen=True)
class PermissionVerdict:
    """Decision of the permission matrix with its explanation."""

    decision: GateDecision
    reason: str


def serialize_payload(payload: Any) -> str:
    """Render a payload as text for pattern matching and summaries."""
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    try:
        return json.dumps(payload, default=str)
    except (TypeError, ValueError):
        return str(payload)


class PolicyEngine:
    """Evaluates messages and actions against the policy tables.

    The engine is stateless; custom tables can be injected for tests or
    deployments with different domains.
    """

    def __init__(
        self,
        domains: tuple[DomainPolicy, ...] | None = None,
        keyword_rules: tuple[KeywordRule, ...] | None = None,
        danger_rules: tuple[DangerRule, ...] | None = None,
    ):
        self.domains = {d.domain: d for d in (domains or DOMAIN_POLICIES)}
        self.keyword_rules = keyword_rules or KEYWORD_RULES
        self.danger_rules = danger_rules or DANGER_RULES
        self._by_handler = {d.handler: d for d in self.domains.values()}

    # Routing

    def match_keywords(self, message: str) -> KeywordMatch | None:
        """Deterministic keyword pass.

        Every rule is checked; within a rule the first matching pattern
        counts. When several domains match, the longest pattern wins and
        ties keep the rule defined first.
        """
        best: KeywordMatch | None = None
        for rule in self.keyword_rules:
            keyword = rule.first_match(message)
            if keyword is None:
                continue
            if best is None or len(keyword) > len(best.keyword):
                best = KeywordMatch(domain=rule.domain, keyword=keyword)
        return best

    def is_forced_escalation(self, message: str) -> bool:
        return bool(ESCALATION_MARKER.search(message))

    def is_valid_intent(self, intent: Any) -> bool:
        """Whether an intent string is domain/action with a known domain."""
        if not isinstance(intent, str):
            return False
        match = INTENT_PATTERN.match(intent.strip())
        return bool(match) and match.group(1) in self.domains

    # Domains

    def domain_policy(self, domain: str) -> DomainPolicy:
        return self.domains.get(domain, FALLBACK_POLICY)

    def domain_for_handler(self, handler: str) -> DomainPolicy:
        """Policy for a handler or worker name ('email-handler' or 'email')."""
        name = handler.strip().lower()
        if name in self._by_handler:
            return self._by_handler[name]
        if name.endswith(HANDLER_SUFFIX):
            name = name[: -len(HANDLER_SUFFIX)]
        return self.domains.get(name, FALLBACK_POLICY)

    def handler_always_gated(self, handler: str) -> bool:
        """Whether a handler belongs to a declared always-gated domain.

        Handlers outside the declared domains are not gated by domain; only
        the danger rules apply to them.
        """
        policy = self.domain_for_handler(handler)
        return policy is not FALLBACK_POLICY and policy.always_gated

    def requires_approval(self, domain: str, dangerous: bool) -> bool:
        return dangerous or self.domain_policy(domain).always_gated

    # Danger

    def danger_categories(self, text: str, payload: Any = None) -> list[str]:
        """Categories of every danger rule matching the text or payload."""
        haystack = f"{text} {serialize_payload(payload)}".strip()
        categories: list[str] = []
        for rule in self.danger_rules:
            if rule.category not in categories and rule.matches(haystack):
                categories.append(rule.category)
        return categories

    def is_dangerous(self, text: str, payload: Any = None) -> bool:
        return bool(self.danger_categories(text, payload))

    # Permissions

    def evaluate_permission(self, role: str, gated: bool) -> PermissionVerdict:
        """Apply the role matrix in priority order.

        Args:
            role: Requester role name
            gated: Whether the action is dangerous or its domain is always gated

        Returns:
            Verdict; QUEUED means a human must decide
        """
        if role == Role.OWNER.value:
            return PermissionVerdict(GateDecision.APPROVED, "OWNER - auto-approved")
        if role == Role.ADMIN.value and not gated:
            return PermissionVerdict(
                GateDecision.APPROVED, "ADMIN - non-gated action auto-approved"
            )
        if role == Role.AGENT.value:
            return PermissionVerdict(
                GateDecision.DENIED,
                "AGENT role cannot execute external actions without OWNER elevation",
            )
        return PermissionVerdict(GateDecision.QUEUED, f"Queued for OWNER review - gated={str(gated).lower()}")
