"""Approval store abstraction and the Markdown block format.

The block format is shared with external tooling that reads the approval
queue, so it is rendered and parsed here for every backend:

    ---

    ## [APR-0001] 2025-01-01T00:00:00.000Z

    - **Status:** PENDING
    - **Requesting Agent:** social-handler
    ...
    - **Resolution Note:** null
"""

import re
from abc import ABC, abstractmethod

from ...core.domain.approvals import ApprovalItem, ApprovalStatus, format_approval_id

NULL = "null"

# (ApprovalItem attribute, Markdown label) in block order
BLOCK_FIELDS: tuple[tuple[str, str], ...] = (
    ("status", "Status"),
    ("requesting_handler", "Requesting Agent"),
    ("action", "Action"),
    ("requester_role", "Requestor Role"),
    ("payload_summary", "Payload"),
    ("reason", "Reason"),
    ("resolved_at", "Resolved At"),
    ("resolved_by", "Resolved By"),
    ("resolution_note", "Resolution Note"),
)

NULLABLE_FIELDS = {"resolved_at", "resolved_by", "resolution_note"}

BLOCK_PATTERN = re.compile(
    r"## \[(APR-\d+)\] (\S+)\n\n([\s\S]*?)(?=\n---|\n## \[|\Z)"
)

# Any block header, parseable or not; id minting counts every one.
HEADER_PATTERN = re.compile(r"^## \[(APR-\d+)\]", re.MULTILINE)


def inline(value: object) -> str:
    """Collapse a value onto one line."""
    return re.sub(r"\s*[\r\n]+\s*", " ", str(value)).strip()


def render_block(item: ApprovalItem) -> str:
    """Render one approval as a Markdown block (without the separator)."""
    lines = [f"## [{item.id}] {item.created_at}", ""]
    for attr, label in BLOCK_FIELDS:
        value = getattr(item, attr)
        if value is None:
            text = NULL
        elif isinstance(value, ApprovalStatus):
            text = value.value
        else:
            text = inline(value)
        lines.append(f"- **{label}:** {text}")
    return "\n".join(lines)


def render_markdown(items: list[ApprovalItem]) -> str:
    """Render a full queue, each block preceded by a separator."""
    return "".join(f"\n---\n\n{render_block(item)}\n" for item in items)


def field_pattern(label: str) -> re.Pattern[str]:
    return re.compile(rf"^- \*\*{re.escape(label)}:\*\*[ \t]?(.*)$", re.MULTILINE)


def parse_block(approval_id: str, created_at: str, body: str) -> ApprovalItem | None:
    """Parse a block body; returns None if required fields are missing."""
    values: dict[str, str | None] = {}
    for attr, label in BLOCK_FIELDS:
        match = field_pattern(label).search(body)
        if match is None:
            values[attr] = None
            continue
        text = match.group(1).strip()
        values[attr] = None if attr in NULLABLE_FIELDS and text == NULL else text

    if values["status"] not in {s.value for s in ApprovalStatus}:
        return None

    return ApprovalItem(
        id=approval_id,
        created_at=created_at,
        status=ApprovalStatus(values["status"]),
        requesting_handler=values["requesting_handler"] or "",
        action=values["action"] or "",
        requester_role=values["requester_role"] or "",
        payload_summary=values["payload_summary"] or "",
        reason=values["reason"] or "",
        resolved_at=values["resolved_at"],
        resolved_by=values["resolved_by"],
        resolution_note=values["resolution_note"],
    )


def parse_markdown(content: str) -> list[ApprovalItem]:
    """Parse every well-formed block in a queue document, in file order."""
    items = []
    for match in BLOCK_PATTERN.finditer(content):
        item = parse_block(match.group(1), match.group(2), match.group(3))
        if item is not None:
            items.append(item)
    return items


class ApprovalStore(ABC):
    """Persistence for approval items.

    Stores are append and update-in-place only. A single writer process is
    assumed; id minting is not protected against concurrent writers.
    """

    @abstractmethod
    def list_items(self) -> list[ApprovalItem]:
        """All items in creation order."""
        pass

    @abstractmethod
    def get(self, approval_id: str) -> ApprovalItem | None:
        pass

    @abstractmethod
    def append(self, item: ApprovalItem) -> None:
        """Persist a new item.

        Raises:
            ApprovalStoreError: If the item cannot be written
        """
        pass

    @abstractmethod
    def resolve(
        self,
        approval_id: str,
        status: ApprovalStatus,
        resolved_at: str,
        resolved_by: str,
        note: str,
    ) -> bool:
        """Transition a PENDING item in place.

        Returns:
            True if the item existed and was still PENDING
        """
        pass

    def next_id(self) -> str:
        """Highest existing numeric suffix plus one."""
        highest = max((item.number for item in self.list_items()), default=0)
        return format_approval_id(highest + 1)

    def list_pending(self) -> list[ApprovalItem]:
        return [item for item in self.list_items() if item.is_pending]

    def export_markdown(self) -> str:
        """Human-readable rendering of the whole queue."""
        return render_markdown(self.list_items())
