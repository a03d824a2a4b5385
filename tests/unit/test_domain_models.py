"""Unit tests for the domain models."""

import re
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from switchyard.core.domain import (
    ApprovalItem,
    ModelTier,
    OrchestratorResult,
    ResolveResult,
    RoutingDecision,
    SubTask,
    WorkerResult,
    format_approval_id,
    utc_timestamp,
)


class TestApprovalModels:
    """Test cases for approval models."""

    def test_approval_id_format(self):
        assert format_approval_id(1) == "APR-0001"
        assert format_approval_id(12345) == "APR-12345"

    def test_approval_item_number(self):
        item = ApprovalItem(
            id="APR-0042", requesting_handler="dev-handler", action="merge", requester_role="ADMIN"
        )

        assert item.number == 42
        assert item.is_pending is True
        assert item.resolved_at is None

    def test_invalid_id_rejected(self):
        with pytest.raises(ValidationError):
            ApprovalItem(id="42", requesting_handler="x", action="y", requester_role="ADMIN")

    def test_timestamp_format(self):
        moment = datetime(2025, 3, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)

        assert utc_timestamp(moment) == "2025-03-01T12:30:05.123Z"
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", utc_timestamp())

    def test_resolve_result_response(self):
        assert ResolveResult(ok=True, id="APR-0001", decision="approve").to_response() == {
            "ok": True,
            "decision": "approve",
            "id": "APR-0001",
        }
        assert ResolveResult(ok=False, id="APR-0001", error="nope").to_response() == {
            "ok": False,
            "error": "nope",
        }


class TestRoutingDecision:
    """Test cases for RoutingDecision."""

    def test_response_uses_agent_alias(self):
        decision = RoutingDecision(
            intent="sre/unclassified",
            target_handler="sre-handler",
            model="keyword",
            model_tier=ModelTier.FREE,
            requires_approval=True,
            dangerous=True,
            escalated=False,
        )

        response = decision.to_response()
        assert response["agent"] == "sre-handler"
        assert response["model_tier"] == "free"
        assert "target_handler" not in response
        assert decision.domain == "sre"

    def test_decision_is_immutable(self):
        decision = RoutingDecision(
            intent="dev/review",
            agent="dev-handler",
            model="qwen3:8b",
            model_tier=ModelTier.ESCALATED_1,
            requires_approval=False,
            dangerous=False,
            escalated=False,
        )

        with pytest.raises(ValidationError):
            decision.intent = "sre/deploy"


class TestTaskModels:
    """Test cases for orchestration models."""

    def test_output_text_prefers_summary_fields(self):
        result = WorkerResult(
            worker="research", label="Research", success=True,
            result={"summary": "three findings", "raw": [1, 2, 3]},
        )
        assert result.output_text() == "three findings"

    def test_output_text_for_failure(self):
        result = WorkerResult(worker="email", label="Email", success=False, error="timed out")
        assert result.output_text() == "timed out"

    def test_output_text_truncates_json(self):
        result = WorkerResult(worker="dev", label="Dev", success=True, result={"rows": ["x" * 50] * 40})
        assert len(result.output_text(limit=100)) == 100

    def test_dry_run_response_shape(self):
        result = OrchestratorResult(
            task="plan it", subtasks=[SubTask(worker="dev", label="Dev")], dry_run=True
        )

        assert result.to_response() == {
            "task": "plan it",
            "subtasks": [{"worker": "dev", "label": "Dev", "payload": {}}],
            "dry_run": True,
        }

    def test_full_response_shape(self):
        response = OrchestratorResult(task="t", summary="done").to_response()

        assert set(response) == {
            "task", "subtasks", "results", "summary", "workers_run", "workers_ok", "duration_ms",
        }
