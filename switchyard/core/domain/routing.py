"""Routing models produced by the classifier.

A RoutingDecision tells callers which handler should process a request,
which model tier produced the decision, and whether the action must pass
through the approval gate before it executes.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .approvals import Role

UNCLASSIFIED_INTENT = "unknown/unclassified"


class ModelTier(str, Enum):
    """Cost tier of the classification pass that produced a decision."""

    FREE = "free"                  # Keyword table, no model call
    ESCALATED_1 = "escalated-1"    # Local model
    ESCALATED_2 = "escalated-2"    # High-capability paid model


class ClassificationRequest(BaseModel):
    """Input to the classifier. Built per call and never persisted."""

    source: str = Field(
        default="api",
        description="Channel the request arrived on"
    )

    requester_role: Role = Field(
        default=Role.OWNER,
        description="Role of the person or agent making the request"
    )

    message: str = Field(
        ...,
        description="Free-text request to classify"
    )

    context: str | None = Field(
        None,
        description="Optional background passed to model passes"
    )


class RoutingDecision(BaseModel):
    """Immutable routing decision.

    `dangerous` is computed from the danger rules independently of the
    classification pass, and `requires_approval` is always true when
    `dangerous` is true.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    intent: str = Field(
        ...,
        description="Intent in domain/action form",
        min_length=1
    )

    target_handler: str = Field(
        ...,
        alias="agent",
        description="Handler that should process the request"
    )

    model: str = Field(
        ...,
        description="Concrete model used, or 'keyword' / 'none'"
    )

    model_tier: ModelTier = Field(
        ...,
        description="Cost tier of the pass that produced this decision"
    )

    requires_approval: bool = Field(
        ...,
        description="Whether the action must be cleared by the approval gate"
    )

    dangerous: bool = Field(
        ...,
        description="Whether the message matched a danger rule"
    )

    escalated: bool = Field(
        ...,
        description="Whether the high-capability tier was reached"
    )

    reason: str = Field(
        default="",
        description="Why this route was chosen"
    )

    @property
    def domain(self) -> str:
        """Domain part of the intent."""
        return self.intent.split("/", 1)[0]

    @property
    def is_unclassified(self) -> bool:
        """Whether every pass failed and the fallback was returned."""
        return self.intent == UNCLASSIFIED_INTENT

    def to_response(self) -> dict[str, Any]:
        """Serialize using the external field names."""
        return self.model_dump(mode="json", by_alias=True)
