"""Default worker set."""

from ..core.config import Settings
from ..llm.base import LLMProviders
from .http_worker import HttpWorker
from .llm_worker import LLMWorker
from .registry import WorkerRegistry

# (name, label, planner description, role prompt)
DEFAULT_WORKERS: tuple[tuple[str, str, str, str], ...] = (
    (
        "research", "Research",
        "research, web search, trend analysis, factual lookups",
        "You are a research specialist. Answer with concise, sourced findings.",
    ),
    (
        "dev", "Dev",
        "code generation, bug fixes, architecture design, code review",
        "You are a senior software engineer. Answer with working code and brief notes.",
    ),
    (
        "ops", "Ops",
        "summaries, reports, meeting notes, scheduling, ops planning",
        "You are an operations assistant. Produce clear summaries and action items.",
    ),
    (
        "email", "Email",
        "email drafting, email campaigns, outbound messages",
        "You draft emails. Return a subject line and body; never claim to have sent it.",
    ),
    (
        "analytics", "Analytics",
        "analytics queries, event data, metrics interpretation",
        "You are a product analyst. Explain which metrics answer the question and why.",
    ),
    (
        "memory", "Memory",
        "memory retrieval, storing context, searching past decisions",
        "You manage long-lived context. State what should be stored or recalled.",
    ),
)


def build_default_registry(settings: Settings, providers: LLMProviders) -> WorkerRegistry:
    """Register the default workers.

    Workers listed in `settings.worker_endpoints` call their HTTP endpoint;
    the rest answer with the cheap model tier.
    """
    registry = WorkerRegistry()
    for name, label, description, role_prompt in DEFAULT_WORKERS:
        endpoint = settings.worker_endpoints.get(name)
        if endpoint:
            run = HttpWorker(endpoint, timeout=settings.worker_timeout_seconds)
        else:
            run = LLMWorker(providers.cheap, role_prompt)
        registry.register(name, label, run, description)
    return registry
