"""Unit tests for approval notifications."""

import json
from unittest.mock import patch

import httpx
import pytest

from switchyard.container import build_notifier
from switchyard.core.config import Settings
from switchyard.core.domain.approvals import ApprovalItem
from switchyard.core.errors import NotificationError
from switchyard.gate import LoggingNotifier, WebhookNotifier
from switchyard.gate.notifier import format_approval_message


@pytest.fixture
def item():
    return ApprovalItem(
        id="APR-0004",
        created_at="2025-01-01T09:00:00.000Z",
        requesting_handler="social-handler",
        action="post-tweet",
        requester_role="ADMIN",
        payload_summary="launch announcement",
    )


def mock_client(handler):
    real_client = httpx.AsyncClient
    return patch(
        "switchyard.gate.notifier.httpx.AsyncClient",
        side_effect=lambda *args, **kwargs: real_client(transport=httpx.MockTransport(handler)),
    )


def test_format_approval_message(item):
    message = format_approval_message(item)

    assert "APR-0004" in message
    assert "social-handler -> Action: `post-tweet`" in message
    assert "/resolve/APR-0004" in message


class TestWebhookNotifier:
    """Test cases for the webhook notifier."""

    @pytest.mark.asyncio
    async def test_posts_alert(self, item):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(204)

        with mock_client(handler):
            await WebhookNotifier("http://hooks.local/approvals").notify(item)

        assert seen[0]["approval_id"] == "APR-0004"
        assert seen[0]["requesting_agent"] == "social-handler"

    @pytest.mark.asyncio
    async def test_error_status_raises(self, item):
        with mock_client(lambda request: httpx.Response(500)):
            with pytest.raises(NotificationError, match="500"):
                await WebhookNotifier("http://hooks.local/approvals").notify(item)


def test_build_notifier():
    assert isinstance(build_notifier(Settings(_env_file=None)), LoggingNotifier)
    webhook = build_notifier(Settings(_env_file=None, notify_webhook_url="http://hooks.local"))
    assert isinstance(webhook, WebhookNotifier)
