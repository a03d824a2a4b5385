"""Exception types shared across the dispatch layer."""


class SwitchyardError(Exception):
    """Base class for all dispatch layer errors."""


class RequestValidationError(SwitchyardError, ValueError):
    """A required field is missing or malformed.

    Surfaced to the caller immediately; no escalation is attempted.
    """


class LLMError(SwitchyardError):
    """A model backend was unreachable, misconfigured or returned an error."""


class UnparseableOutputError(LLMError):
    """A model replied but its output could not be parsed or validated."""


class EscalationExhausted(SwitchyardError):
    """Every step of an escalation ladder failed.

    Attributes:
        failures: (step name, reason) pairs in the order they were tried
    """

    def __init__(self, failures: list[tuple[str, str]]):
        self.failures = failures
        summary = "; ".join(f"{name}: {reason}" for name, reason in failures)
        super().__init__(f"All escalation steps failed ({summary})")

    @property
    def last_reason(self) -> str:
        """Reason reported by the final step."""
        return self.failures[-1][1] if self.failures else "no steps configured"


class ApprovalStoreError(SwitchyardError):
    """The approval queue could not be read or written."""


class NotificationError(SwitchyardError):
    """An out-of-band approval notification could not be delivered."""
