"""Approval store backed by the legacy Markdown queue file."""

import logging
import re
from pathlib import Path

from ...core.domain.approvals import ApprovalItem, ApprovalStatus, approval_number, format_approval_id
from ...core.errors import ApprovalStoreError
from .base import (
    BLOCK_PATTERN,
    HEADER_PATTERN,
    NULL,
    ApprovalStore,
    field_pattern,
    inline,
    parse_markdown,
    render_block,
)

logger = logging.getLogger(__name__)


class MarkdownApprovalStore(ApprovalStore):
    """Reads and writes approvals.md in the block format other tools expect.

    Resolution rewrites only the Status, Resolved At, Resolved By and
    Resolution Note values of the target block.
    """

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def list_items(self) -> list[ApprovalItem]:
        return parse_markdown(self._read())

    def get(self, approval_id: str) -> ApprovalItem | None:
        for item in self.list_items():
            if item.id == approval_id:
                return item
        return None

    def append(self, item: ApprovalItem) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(f"\n---\n\n{render_block(item)}\n")
        except OSError as e:
            raise ApprovalStoreError(f"Could not append {item.id} to {self.path}: {e}") from e

    def next_id(self) -> str:
        """Highest id among all block headers plus one, malformed blocks included."""
        numbers = [approval_number(m.group(1)) for m in HEADER_PATTERN.finditer(self._read())]
        return format_approval_id(max(numbers, default=0) + 1)

    def resolve(
        self,
        approval_id: str,
        status: ApprovalStatus,
        resolved_at: str,
        resolved_by: str,
        note: str,
    ) -> bool:
        content = self._read()
        block = next(
            (m for m in BLOCK_PATTERN.finditer(content) if m.group(1) == approval_id),
            None,
        )
        if block is None:
            return False

        body = block.group(0)
        status_line = field_pattern("Status").search(body)
        if status_line is None or status_line.group(1).strip() != ApprovalStatus.PENDING.value:
            return False

        replacements = (
            ("Status", ApprovalStatus.PENDING.value, status.value),
            ("Resolved At", NULL, resolved_at),
            ("Resolved By", NULL, inline(resolved_by)),
            ("Resolution Note", NULL, inline(note)),
        )
        for label, expected, value in replacements:
            pattern = re.compile(
                rf"^(- \*\*{re.escape(label)}:\*\*) {re.escape(expected)}$", re.MULTILINE
            )
            body, count = pattern.subn(lambda m: f"{m.group(1)} {value}", body, count=1)
            if count == 0:
                logger.warning(f"Approval block {approval_id} is missing '{label}: {expected}'")
                return False

        self._write(content[: block.start()] + body + content[block.end():])
        return True

    def _read(self) -> str:
        if not self.path.exists():
            return ""
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ApprovalStoreError(f"Could not read {self.path}: {e}") from e

    def _write(self, content: str) -> None:
        try:
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ApprovalStoreError(f"Could not write {self.path}: {e}") from e
