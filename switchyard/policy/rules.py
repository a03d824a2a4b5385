"""Declarative policy tables.

All routing keywords, danger patterns and per-domain gating defaults live
here as tagged rules. The classifier and the approval gate both read these
tables through the PolicyEngine, so a message flagged dangerous on one side
is flagged dangerous on the other.
"""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DomainPolicy:
    """Routing target and gating default for one domain."""

    domain: str
    handler: str
    always_gated: bool = False
    description: str = ""


@dataclass(frozen=True)
class KeywordRule:
    """Keyword patterns that route a message to a domain.

    Patterns are regular expressions matched case-insensitively anywhere in
    the message. The pattern text length is its specificity.
    """

    domain: str
    patterns: tuple[str, ...]
    compiled: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "compiled", tuple(re.compile(p, re.IGNORECASE) for p in self.patterns)
        )

    def first_match(self, message: str) -> str | None:
        """Pattern text of the first pattern that matches, if any."""
        for source, pattern in zip(self.patterns, self.compiled):
            if pattern.search(message):
                return source
        return None


@dataclass(frozen=True)
class DangerRule:
    """A pattern that marks an action as dangerous, tagged by category."""

    category: str
    pattern: str
    compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", re.compile(self.pattern, re.IGNORECASE))

    def matches(self, text: str) -> bool:
        return bool(self.compiled.search(text))


DOMAIN_POLICIES: tuple[DomainPolicy, ...] = (
    DomainPolicy("control", "control-handler", description="approvals, permissions, queue review"),
    DomainPolicy("ops", "ops-handler", description="summaries, reminders, status reports"),
    DomainPolicy("research", "research-handler", description="web research, trends, factual lookups"),
    DomainPolicy("discord", "discord-handler", description="community channel messaging and moderation"),
    DomainPolicy("social", "social-handler", always_gated=True, description="external social posting"),
    DomainPolicy("dev", "dev-handler", description="code generation, bug fixes, reviews"),
    DomainPolicy("analytics", "analytics-handler", description="product analytics queries and reports"),
    DomainPolicy("email", "email-handler", always_gated=True, description="transactional and bulk email"),
    DomainPolicy("memory", "memory-handler", description="storing and recalling long-lived context"),
    DomainPolicy("sre", "sre-handler", description="deploys, restarts, server health"),
)

# Unknown domains fall back to human review through the control handler.
FALLBACK_POLICY = DomainPolicy(
    "unknown", "control-handler", always_gated=True, description="unrecognised domain"
)

KEYWORD_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("control", (
        r"approve", r"deny", r"pending approval", r"queue review",
        r"show.*approval", r"permission",
    )),
    KeywordRule("ops", (
        r"today's summary", r"daily summary", r"weekly digest",
        r"remind me", r"set a reminder", r"status report", r"system status",
        r"archive.*log",
    )),
    KeywordRule("research", (
        r"search for", r"research ", r"look up", r"find info about",
        r"what's trending", r"trending in", r"competitive analysis",
        r"web search",
    )),
    KeywordRule("discord", (
        r"post in #", r"send to #", r"discord channel", r"mute @",
        r"kick @", r"ban @", r"discord server", r"moderate ",
    )),
    KeywordRule("social", (
        r"tweet", r"retweet", r"post on x", r"post on twitter",
        r"draft a post", r"social media", r"dm @", r"x post",
    )),
    KeywordRule("dev", (
        r"fix the", r"fix this bug", r"implement ", r"build a ",
        r"add a feature", r"refactor ", r"code review", r"review this pr",
        r"architecture", r"debug ", r"write a function", r"write a script",
    )),
    KeywordRule("analytics", (
        r"analytics", r"how many users", r"\bdau\b", r"\bmau\b",
        r"metric", r"funnel", r"retention", r"usage stats",
    )),
    KeywordRule("email", (
        r"send.*email", r"email campaign", r"newsletter",
        r"draft.*email", r"email template",
    )),
    KeywordRule("memory", (
        r"remember that", r"recall ", r"what did we decide", r"store this",
        r"retrieve from memory", r"look in memory", r"forget ",
    )),
    KeywordRule("sre", (
        r"deploy ", r"docker ", r"container", r"server logs",
        r"restart the", r"is the server", r"server up", r"uptime",
        r"helm ", r"kubernetes", r"k8s",
    )),
)

DANGER_RULES: tuple[DangerRule, ...] = (
    DangerRule("mass-messaging", r"mass.?dm"),
    DangerRule("mass-messaging", r"bulk.?(?:dm|message|email)"),
    DangerRule("destructive", r"\bdelete\b"),
    DangerRule("destructive", r"\bpurge\b"),
    DangerRule("destructive", r"\bdrop\b"),
    DangerRule("payment", r"\bpayment\b"),
    DangerRule("payment", r"\bbilling\b"),
    DangerRule("credentials", r"\bcredential"),
    DangerRule("credentials", r"password"),
    DangerRule("credentials", r"\bsecrets?\b"),
    DangerRule("credentials", r"rotate.*(?:key|secret)"),
    DangerRule("credentials", r"api.?key"),
    DangerRule("production-deploy", r"deploy.*prod"),
    DangerRule("production-deploy", r"prod.*deploy"),
    DangerRule("bulk-campaign", r"(?:send|launch).*campaign"),
    DangerRule("social-outbound", r"post.?tweet"),
    DangerRule("social-outbound", r"\bretweet"),
    DangerRule("social-outbound", r"send.?dm"),
    DangerRule("moderation", r"(?:kick|ban).?user"),
    DangerRule("direct-contact", r"\bcall\b.*\b(?:people|users?|them|him|her)\b"),
)

# Case-sensitive marker that forces the high-capability pass.
ESCALATION_MARKER = re.compile(r"\bESCALATE\b")

INTENT_PATTERN = re.compile(r"^([a-z][a-z0-9_-]*)/([a-z0-9][a-z0-9_-]*)$")
