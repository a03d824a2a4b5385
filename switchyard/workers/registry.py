"""Worker registry for the orchestrator.

Sub-task plans may only name workers registered here; anything else is
discarded during decomposition.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator

logger = logging.getLogger(__name__)

WorkerFn = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class WorkerSpec:
    """A registered worker.

    Attributes:
        name: Registry key used in plans
        label: Display name used in synthesis and results
        run: Coroutine function taking the sub-task payload
        description: Capability line shown to the planner
    """

    name: str
    label: str
    run: WorkerFn
    description: str = ""


class WorkerRegistry:
    """Fixed set of workers the orchestrator can dispatch to."""

    def __init__(self):
        self._workers: dict[str, WorkerSpec] = {}

    def register(self, name: str, label: str, run: WorkerFn, description: str = "") -> WorkerSpec:
        """Register a worker, replacing any existing one with the same name."""
        if name in self._workers:
            logger.warning(f"Worker '{name}' is being re-registered")

        spec = WorkerSpec(name=name, label=label, run=run, description=description)
        self._workers[name] = spec
        logger.info(f"Registered worker '{name}' ({label})")
        return spec

    def get(self, name: str) -> WorkerSpec | None:
        return self._workers.get(name)

    def names(self) -> list[str]:
        return list(self._workers)

    def describe(self) -> str:
        """Planner prompt lines, one per worker."""
        return "\n".join(
            f"- {spec.name:<10} -> {spec.description or spec.label}"
            for spec in self._workers.values()
        )

    def __contains__(self, name: object) -> bool:
        return name in self._workers

    def __iter__(self) -> Iterator[WorkerSpec]:
        return iter(self._workers.values())

    def __len__(self) -> int:
        return len(self._workers)
