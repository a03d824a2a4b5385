"""Component wiring.

`build_container` creates every component once from settings; the HTTP
app and tests receive the resulting Container instead of module globals.
"""

import logging
from dataclasses import dataclass

from .classifier import Classifier
from .core.audit import AuditLog
from .core.config import Settings
from .core.status import StatusBoard
from .gate import ApprovalGate, LoggingNotifier, Notifier, WebhookNotifier, build_store
from .llm import LLMProviders, build_providers
from .orchestrator import Orchestrator
from .policy import PolicyEngine
from .workers import WorkerRegistry, build_default_registry

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Wired components of one running dispatch layer."""

    settings: Settings
    audit: AuditLog
    status: StatusBoard
    policy: PolicyEngine
    providers: LLMProviders
    classifier: Classifier
    gate: ApprovalGate
    registry: WorkerRegistry
    orchestrator: Orchestrator


def build_notifier(settings: Settings) -> Notifier:
    if settings.notify_webhook_url:
        return WebhookNotifier(settings.notify_webhook_url)
    return LoggingNotifier()


def build_container(settings: Settings, providers: LLMProviders | None = None) -> Container:
    """Create all components from settings.

    Args:
        settings: Application settings
        providers: Optional pre-built providers (tests inject fakes here)
    """
    providers = providers or build_providers(settings)
    audit = AuditLog(settings.audit_log_path)
    policy = PolicyEngine()
    registry = build_default_registry(settings, providers)
    status = StatusBoard(["classifier", "orchestrator", *registry.names()])

    classifier = Classifier(
        policy,
        local=providers.local,
        capable=providers.capable,
        audit=audit,
        status=status,
        confidence_floor=settings.classifier_confidence_floor,
        local_attempts=settings.classifier_local_attempts,
    )
    gate = ApprovalGate(build_store(settings), policy, audit, build_notifier(settings))
    orchestrator = Orchestrator(
        providers,
        registry,
        gate,
        policy,
        audit,
        status=status,
        worker_timeout=settings.worker_timeout_seconds,
        max_subtasks=settings.max_subtasks,
    )

    logger.info(
        f"Dispatch layer ready: approvals={settings.approval_backend} "
        f"workers={', '.join(registry.names())}"
    )
    return Container(
        settings=settings,
        audit=audit,
        status=status,
        policy=policy,
        providers=providers,
        classifier=classifier,
        gate=gate,
        registry=registry,
        orchestrator=orchestrator,
    )
