"""Unit tests for the approval stores."""

import pytest

from switchyard.core.config import Settings
from switchyard.core.domain.approvals import ApprovalItem, ApprovalStatus
from switchyard.gate.stores import (
    MarkdownApprovalStore,
    SQLiteApprovalStore,
    build_store,
    parse_markdown,
    render_block,
)

TIMESTAMP = "2025-01-01T09:00:00.000Z"


def make_item(number: int, **overrides) -> ApprovalItem:
    fields = {
        "id": f"APR-{number:04d}",
        "created_at": TIMESTAMP,
        "requesting_handler": "social-handler",
        "action": "post-tweet",
        "requester_role": "ADMIN",
        "payload_summary": "launch announcement",
        "reason": "product launch",
    }
    fields.update(overrides)
    return ApprovalItem(**fields)


@pytest.fixture(params=["sqlite", "markdown"])
def store(request, tmp_path):
    if request.param == "sqlite":
        return SQLiteApprovalStore(tmp_path / "approvals.db")
    return MarkdownApprovalStore(tmp_path / "approvals.md")


class TestApprovalStores:
    """Behaviour shared by every backend."""

    def test_empty_store(self, store):
        assert store.list_items() == []
        assert store.get("APR-0001") is None
        assert store.next_id() == "APR-0001"

    def test_append_and_get(self, store):
        store.append(make_item(1))

        item = store.get("APR-0001")
        assert item.action == "post-tweet"
        assert item.status == ApprovalStatus.PENDING
        assert item.created_at == TIMESTAMP
        assert item.resolved_by is None
        assert store.next_id() == "APR-0002"

    def test_next_id_uses_highest_suffix(self, store):
        store.append(make_item(1))
        store.append(make_item(7))

        assert store.next_id() == "APR-0008"

    def test_resolve_transitions_once(self, store):
        store.append(make_item(1))

        assert store.resolve("APR-0001", ApprovalStatus.APPROVED, TIMESTAMP, "OWNER", "ship it")
        assert not store.resolve("APR-0001", ApprovalStatus.DENIED, TIMESTAMP, "OWNER", "changed my mind")

        item = store.get("APR-0001")
        assert item.status == ApprovalStatus.APPROVED
        assert item.resolved_by == "OWNER"
        assert item.resolution_note == "ship it"

    def test_resolve_unknown_id(self, store):
        assert not store.resolve("APR-0009", ApprovalStatus.DENIED, TIMESTAMP, "OWNER", "none")

    def test_list_pending(self, store):
        store.append(make_item(1))
        store.append(make_item(2, action="send-dm"))
        store.resolve("APR-0001", ApprovalStatus.DENIED, TIMESTAMP, "OWNER", "none")

        assert [i.id for i in store.list_pending()] == ["APR-0002"]
        assert [i.id for i in store.list_items()] == ["APR-0001", "APR-0002"]

    def test_export_markdown(self, store):
        store.append(make_item(1))

        exported = store.export_markdown()
        assert exported.startswith("\n---\n\n## [APR-0001] 2025-01-01T09:00:00.000Z\n")
        assert "- **Status:** PENDING" in exported
        assert parse_markdown(exported)[0] == store.get("APR-0001")


class TestMarkdownFormat:
    """Compatibility with the block format other tools read."""

    def test_append_writes_exact_block(self, tmp_path):
        path = tmp_path / "approvals.md"
        MarkdownApprovalStore(path).append(make_item(1))

        assert path.read_text() == (
            "\n---\n\n"
            "## [APR-0001] 2025-01-01T09:00:00.000Z\n"
            "\n"
            "- **Status:** PENDING\n"
            "- **Requesting Agent:** social-handler\n"
            "- **Action:** post-tweet\n"
            "- **Requestor Role:** ADMIN\n"
            "- **Payload:** launch announcement\n"
            "- **Reason:** product launch\n"
            "- **Resolved At:** null\n"
            "- **Resolved By:** null\n"
            "- **Resolution Note:** null\n"
        )

    def test_resolve_rewrites_only_resolution_fields(self, tmp_path):
        path = tmp_path / "approvals.md"
        store = MarkdownApprovalStore(path)
        store.append(make_item(1))
        store.append(make_item(2))

        store.resolve("APR-0001", ApprovalStatus.DENIED, "2025-01-02T00:00:00.000Z", "OWNER", "too early")

        content = path.read_text()
        first, second = content.split("## [APR-0002]")
        assert "- **Status:** DENIED" in first
        assert "- **Resolved At:** 2025-01-02T00:00:00.000Z" in first
        assert "- **Resolved By:** OWNER" in first
        assert "- **Resolution Note:** too early" in first
        assert "- **Action:** post-tweet" in first
        assert "- **Status:** PENDING" in second
        assert "- **Resolved At:** null" in second

    def test_reads_externally_written_queue(self, tmp_path):
        """Test a queue file written by other tooling is parsed."""
        path = tmp_path / "approvals.md"
        path.write_text(
            "# Approvals\n"
            "\n---\n\n"
            "## [APR-0003] 2024-12-31T23:59:59.000Z\n\n"
            "- **Status:** APPROVED\n"
            "- **Requesting Agent:** email-handler\n"
            "- **Action:** send-campaign\n"
            "- **Requestor Role:** ADMIN\n"
            "- **Payload:** {\"list\":\"all\"}\n"
            "- **Reason:** \n"
            "- **Resolved At:** 2025-01-01T08:00:00.000Z\n"
            "- **Resolved By:** OWNER\n"
            "- **Resolution Note:** none\n"
        )
        store = MarkdownApprovalStore(path)

        item = store.get("APR-0003")
        assert item.status == ApprovalStatus.APPROVED
        assert item.reason == ""
        assert item.payload_summary == '{"list":"all"}'
        assert item.resolution_note == "none"
        assert store.next_id() == "APR-0004"

    def test_unparseable_block_id_is_not_reused(self, tmp_path):
        """Test a hand-edited block still reserves its id."""
        path = tmp_path / "approvals.md"
        store = MarkdownApprovalStore(path)
        store.append(make_item(1))
        path.write_text(
            path.read_text()
            + "\n---\n\n"
            "## [APR-0005] 2025-01-03T00:00:00.000Z\n\n"
            "- **Status:** ON HOLD\n"
            "- **Action:** send-dm\n"
        )

        assert [i.id for i in store.list_items()] == ["APR-0001"]
        assert store.next_id() == "APR-0006"

    def test_multiline_values_are_collapsed(self):
        block = render_block(make_item(1, reason="line one\nline two"))

        assert "- **Reason:** line one line two" in block


class TestBuildStore:
    """Test cases for backend selection."""

    def test_sqlite_default(self, tmp_path):
        store = build_store(Settings(_env_file=None, data_dir=tmp_path))
        assert isinstance(store, SQLiteApprovalStore)

    def test_markdown_backend(self, tmp_path):
        store = build_store(Settings(_env_file=None, data_dir=tmp_path, approval_backend="markdown"))
        assert isinstance(store, MarkdownApprovalStore)
