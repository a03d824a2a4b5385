"""Shared fixtures for the switchyard test suite."""

import asyncio
from typing import Any

import pytest

from switchyard.core.audit import AuditLog
from switchyard.core.errors import LLMError
from switchyard.core.status import StatusBoard
from switchyard.gate import ApprovalGate, SQLiteApprovalStore
from switchyard.llm.base import LLMProvider, LLMProviders
from switchyard.policy import PolicyEngine


class FakeProvider(LLMProvider):
    """Scripted provider.

    Each call consumes the next scripted reply. A reply that is an exception
    instance is raised instead of returned. An exhausted script raises
    LLMError, like an unreachable backend.
    """

    def __init__(self, replies: list[Any] | None = None, name: str = "fake", model: str = "fake-model"):
        self._name = name
        self._model = model
        self.replies = list(replies or [])
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def model_name(self) -> str:
        return self._model

    async def complete(self, system: str, user: str, max_tokens: int = 512) -> str:
        self.calls.append((system, user))
        await asyncio.sleep(0)
        if not self.replies:
            raise LLMError(f"{self._name}: no reply scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_provider():
    """Factory for scripted providers."""
    return FakeProvider


@pytest.fixture
def providers():
    """Provider bundle with empty scripts; tests append replies as needed."""
    return LLMProviders(
        local=FakeProvider(name="local", model="qwen3:8b"),
        cheap=FakeProvider(name="cheap", model="gpt-4o-mini"),
        capable=FakeProvider(name="capable", model="claude-sonnet-4-6"),
    )


@pytest.fixture
def audit():
    return AuditLog()


@pytest.fixture
def policy():
    return PolicyEngine()


@pytest.fixture
def status_board():
    return StatusBoard()


@pytest.fixture
def approval_store(tmp_path):
    return SQLiteApprovalStore(tmp_path / "approvals.db")


@pytest.fixture
def gate(approval_store, policy, audit):
    return ApprovalGate(approval_store, policy, audit)
