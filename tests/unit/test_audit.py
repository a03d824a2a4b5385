"""Unit tests for the audit log and audit entries."""

import re

from switchyard.core.audit import AuditLog
from switchyard.core.domain.audit import AuditLevel, AuditLogEntry

LINE_PATTERN = re.compile(
    r'^\[(INFO|WARN|ERROR|APPROVE|DENY|BLOCK)\] \d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z'
    r' \| agent=\S+ \| action=\S+ \| user_role=\S+ \| model=\S+ \| outcome=\S+'
    r' \| escalated=(true|false) \| note="[^"]*"$'
)


class TestAuditLogEntry:
    """Test cases for the one-line audit format."""

    def test_line_format(self):
        """Test the rendered line matches the audit format."""
        entry = AuditLogEntry(
            level=AuditLevel.BLOCK,
            component="gate",
            action="gate",
            outcome="queued",
            requester_role="ADMIN",
            note="id=APR-0001 agent=social-handler",
        )

        line = entry.to_line()
        assert LINE_PATTERN.match(line)
        assert "| escalated=false |" in line
        assert line.endswith('note="id=APR-0001 agent=social-handler"')

    def test_note_is_single_line_without_double_quotes(self):
        """Test notes cannot break the line format."""
        entry = AuditLogEntry(
            component="orchestrator",
            action="start",
            outcome="running",
            note='task="multi\nline"',
        )

        line = entry.to_line()
        assert "\n" not in line
        assert line.endswith("note=\"task='multi line'\"")


class TestAuditLog:
    """Test cases for the audit writer."""

    def test_record_appends_to_file(self, tmp_path):
        """Test entries are appended one line each."""
        path = tmp_path / "logs" / "run_log.md"
        log = AuditLog(path)

        log.record("classifier", "route", "success", model="keyword")
        log.record("gate", "gate", "denied", level=AuditLevel.DENY, requester_role="AGENT")

        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("[INFO]")
        assert "model=keyword" in lines[0]
        assert lines[1].startswith("[DENY]")
        assert "user_role=AGENT" in lines[1]

    def test_recent_is_bounded(self):
        """Test only the most recent entries are kept in memory."""
        log = AuditLog(keep_recent=3)
        for i in range(5):
            log.record("gate", "gate", f"n{i}")

        assert [e.outcome for e in log.recent(10)] == ["n2", "n3", "n4"]
        assert [e.outcome for e in log.recent(1)] == ["n4"]
        assert log.recent(0) == []

    def test_write_failure_is_not_raised(self, tmp_path):
        """Test an unwritable audit file does not break the caller."""
        path = tmp_path / "run_log.md"
        path.mkdir()
        log = AuditLog(path)

        entry = log.record("gate", "gate", "queued")

        assert entry.outcome == "queued"
        assert log.recent(1) == [entry]
