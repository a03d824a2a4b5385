"""Unit tests for the intent classifier."""

import json

import pytest

from switchyard.classifier import Classifier
from switchyard.core.domain.audit import AuditLevel
from switchyard.core.domain.routing import UNCLASSIFIED_INTENT, ClassificationRequest, ModelTier
from switchyard.core.errors import LLMError, RequestValidationError

AMBIGUOUS = "what should we do about the thing from yesterday"


def reply(intent: str, confidence: int = 90, reason: str = "model reason") -> str:
    return json.dumps({"intent": intent, "confidence": confidence, "reason": reason})


@pytest.fixture
def classifier(providers, policy, audit, status_board):
    return Classifier(
        policy,
        local=providers.local,
        capable=providers.capable,
        audit=audit,
        status=status_board,
    )


class TestKeywordPass:
    """Test cases for pass 1."""

    @pytest.mark.asyncio
    async def test_deploy_to_production(self, classifier, providers):
        """Test a production deploy routes to sre and requires approval."""
        decision = await classifier.classify("api", "OWNER", "deploy the latest build to production")

        assert decision.target_handler == "sre-handler"
        assert decision.intent == "sre/unclassified"
        assert decision.dangerous is True
        assert decision.requires_approval is True
        assert decision.model_tier == ModelTier.FREE
        assert decision.model == "keyword"
        assert decision.escalated is False
        assert providers.local.calls == []
        assert providers.capable.calls == []

    @pytest.mark.asyncio
    async def test_always_gated_domain(self, classifier):
        """Test social requests need approval without danger words."""
        decision = await classifier.classify("discord", "ADMIN", "draft a post about our roadmap")

        assert decision.target_handler == "social-handler"
        assert decision.dangerous is False
        assert decision.requires_approval is True

    @pytest.mark.asyncio
    async def test_harmless_keyword_route(self, classifier):
        decision = await classifier.classify("api", "ADMIN", "search for recent papers on RAG")

        assert decision.target_handler == "research-handler"
        assert decision.requires_approval is False


class TestModelPasses:
    """Test cases for passes 2 and 3."""

    @pytest.mark.asyncio
    async def test_confident_local_model(self, classifier, providers):
        providers.local.replies = [reply("research/factual", 92)]

        decision = await classifier.classify("api", "OWNER", AMBIGUOUS)

        assert decision.intent == "research/factual"
        assert decision.target_handler == "research-handler"
        assert decision.model_tier == ModelTier.ESCALATED_1
        assert decision.model == "qwen3:8b"
        assert decision.escalated is False
        assert len(providers.local.calls) == 1
        assert providers.capable.calls == []

    @pytest.mark.asyncio
    async def test_second_local_attempt(self, classifier, providers):
        """Test a failed first local attempt is retried before escalating."""
        providers.local.replies = [LLMError("timeout"), reply("ops/status-report", 85)]

        decision = await classifier.classify("api", "OWNER", AMBIGUOUS)

        assert decision.intent == "ops/status-report"
        assert decision.model_tier == ModelTier.ESCALATED_1
        assert len(providers.local.calls) == 2

    @pytest.mark.asyncio
    async def test_low_confidence_escalates(self, classifier, providers, audit):
        """Test two low-confidence local replies escalate to the capable model."""
        providers.local.replies = [reply("dev/feature", 60), reply("dev/feature", 79)]
        providers.capable.replies = [reply("dev/architecture", 40)]

        decision = await classifier.classify("api", "OWNER", AMBIGUOUS)

        assert decision.intent == "dev/architecture"
        assert decision.model_tier == ModelTier.ESCALATED_2
        assert decision.model == "claude-sonnet-4-6"
        assert decision.escalated is True
        assert len(providers.local.calls) == 2
        assert any(e.level == AuditLevel.WARN and e.action == "escalate" for e in audit.recent())

    @pytest.mark.asyncio
    async def test_unknown_domain_rejected(self, classifier, providers):
        """Test intents outside the known domains count as failed passes."""
        providers.local.replies = [reply("weather/today", 99), "not json at all"]
        providers.capable.replies = [f"```json\n{reply('analytics/query')}\n```"]

        decision = await classifier.classify("api", "OWNER", AMBIGUOUS)

        assert decision.intent == "analytics/query"
        assert decision.model_tier == ModelTier.ESCALATED_2

    @pytest.mark.asyncio
    async def test_escalate_marker_skips_cheaper_passes(self, classifier, providers):
        """Test the ESCALATE marker goes straight to the capable model."""
        providers.capable.replies = [reply("memory/purge", 70)]

        decision = await classifier.classify("api", "OWNER", "ESCALATE: please delete old records")

        assert providers.local.calls == []
        assert decision.intent == "memory/purge"
        assert decision.model_tier == ModelTier.ESCALATED_2
        assert decision.dangerous is True
        assert decision.requires_approval is True

    @pytest.mark.asyncio
    async def test_context_is_passed_to_models(self, classifier, providers):
        providers.local.replies = [reply("analytics/report")]

        await classifier.classify("api", "OWNER", AMBIGUOUS, context="weekly numbers")

        assert "Context: weekly numbers" in providers.local.calls[0][1]


class TestFallback:
    """Test cases for the unclassified fallback."""

    @pytest.mark.asyncio
    async def test_all_passes_fail(self, classifier, providers, audit):
        providers.local.replies = [LLMError("connection refused"), LLMError("connection refused")]
        providers.capable.replies = ["I cannot help with that"]

        decision = await classifier.classify("api", "AGENT", AMBIGUOUS)

        assert decision.intent == UNCLASSIFIED_INTENT
        assert decision.is_unclassified is True
        assert decision.target_handler == "control-handler"
        assert decision.requires_approval is True
        assert decision.escalated is True
        assert decision.model == "none"
        assert decision.model_tier == ModelTier.ESCALATED_2
        assert "Last error" in decision.reason
        assert audit.recent(1)[0].outcome == "unclassified"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   \n"])
    async def test_empty_message_rejected(self, classifier, message):
        with pytest.raises(RequestValidationError):
            await classifier.classify("api", "OWNER", message)


class TestSideEffects:
    """Test cases for audit and status reporting."""

    @pytest.mark.asyncio
    async def test_decision_is_audited(self, classifier, audit):
        await classifier.classify("discord", "ADMIN", "deploy the latest build to production")

        entry = audit.recent(1)[0]
        assert entry.component == "classifier"
        assert entry.action == "route"
        assert entry.level == AuditLevel.INFO
        assert entry.requester_role == "ADMIN"
        assert entry.model_used == "keyword"
        assert "agent=sre-handler" in entry.note
        assert "source=discord" in entry.note

    @pytest.mark.asyncio
    async def test_status_returns_to_idle(self, classifier, status_board):
        updates = []
        status_board.subscribe(lambda handler_id, update: updates.append(update["status"]))

        await classifier.classify("api", "OWNER", "remind me to stretch")

        assert updates == ["working", "idle"]
        assert status_board.get("classifier").status == "idle"

    @pytest.mark.asyncio
    async def test_classify_request_model(self, classifier):
        request = ClassificationRequest(message="how many users signed up this week")

        decision = await classifier.classify_request(request)

        assert decision.target_handler == "analytics-handler"
