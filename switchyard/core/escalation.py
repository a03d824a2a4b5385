"""Ordered escalation over model providers.

Components state their fallback ladder declaratively as a list of
EscalationStep objects, cheapest first. `escalate` tries them strictly in
order and returns the first accepted result, so no component hand-rolls
nested fallback calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, TypeVar

from .errors import EscalationExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Returns None to accept a result, or a rejection reason.
AcceptFn = Callable[[T], str | None]


@dataclass
class EscalationStep(Generic[T]):
    """One rung of an escalation ladder.

    Attributes:
        name: Identifier used in logs and failure reports
        call: Coroutine factory producing the step's result
        tier: Free-form cost label carried back to the caller
        accept: Optional check that can reject a result
    """

    name: str
    call: Callable[[], Awaitable[T]]
    tier: str = ""
    accept: AcceptFn | None = None


@dataclass
class EscalationOutcome(Generic[T]):
    """Accepted result plus the failures that preceded it."""

    value: T
    step: EscalationStep[T]
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def attempts(self) -> int:
        return len(self.failures) + 1


async def escalate(
    steps: list[EscalationStep[T]],
    on_failure: Callable[[EscalationStep[T], str], None] | None = None,
) -> EscalationOutcome[T]:
    """Run steps in order until one produces an accepted result.

    Any exception raised by a step counts as a failed step and the next one
    is tried. Cancellation is not intercepted.

    Args:
        steps: Ladder, cheapest first
        on_failure: Optional hook called with each failed step and reason

    Returns:
        Outcome holding the first accepted value

    Raises:
        EscalationExhausted: If every step failed
    """
    failures: list[tuple[str, str]] = []

    for step in steps:
        try:
            value = await step.call()
        except Exception as e:
            reason = str(e) or e.__class__.__name__
        else:
            rejection = step.accept(value) if step.accept else None
            if rejection is None:
                return EscalationOutcome(value=value, step=step, failures=failures)
            reason = rejection

        logger.info(f"Escalation step '{step.name}' failed: {reason}")
        failures.append((step.name, reason))
        if on_failure is not None:
            on_failure(step, reason)

    raise EscalationExhausted(failures)
