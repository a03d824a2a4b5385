"""Out-of-band notifications for newly queued approvals.

Delivery is best-effort. The approval item is the source of truth whether
or not anyone was told about it.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from ..core.domain.approvals import ApprovalItem
from ..core.errors import NotificationError

logger = logging.getLogger(__name__)


def format_approval_message(item: ApprovalItem) -> str:
    """Owner-facing text describing a queued approval."""
    return (
        f"Approval needed `{item.id}`\n"
        f"Agent: {item.requesting_handler} -> Action: `{item.action}`\n"
        f"Payload: {item.payload_summary}\n\n"
        f"Resolve with POST /resolve/{item.id} (approve or deny)."
    )


class Notifier(ABC):
    """Delivers approval alerts to the owner."""

    @abstractmethod
    async def notify(self, item: ApprovalItem) -> None:
        """Send an alert for a queued item.

        Raises:
            NotificationError: If delivery failed
        """
        pass


class LoggingNotifier(Notifier):
    """Writes the alert to the application log."""

    async def notify(self, item: ApprovalItem) -> None:
        logger.info(format_approval_message(item))


class WebhookNotifier(Notifier):
    """Posts the alert as JSON to a webhook URL."""

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    async def notify(self, item: ApprovalItem) -> None:
        body = {
            "text": format_approval_message(item),
            "approval_id": item.id,
            "action": item.action,
            "requesting_agent": item.requesting_handler,
        }
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(self.url, json=body, timeout=self.timeout)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"Webhook returned {e.response.status_code} for {item.id}"
            ) from e
        except httpx.RequestError as e:
            raise NotificationError(f"Webhook request failed for {item.id}: {e}") from e
