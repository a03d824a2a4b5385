"""Workers the orchestrator dispatches sub-tasks to."""

from .defaults import DEFAULT_WORKERS, build_default_registry
from .http_worker import HttpWorker
from .llm_worker import LLMWorker
from .registry import WorkerRegistry, WorkerSpec

__all__ = [
    "DEFAULT_WORKERS",
    "HttpWorker",
    "LLMWorker",
    "WorkerRegistry",
    "WorkerSpec",
    "build_default_registry",
]
