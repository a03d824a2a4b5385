"""Approval queue storage backends."""

from ...core.config import Settings
from .base import ApprovalStore, parse_markdown, render_block, render_markdown
from .markdown_store import MarkdownApprovalStore
from .sqlite_store import SQLiteApprovalStore


def build_store(settings: Settings) -> ApprovalStore:
    """Create the approval store selected by `approval_backend`."""
    if settings.approval_backend == "markdown":
        return MarkdownApprovalStore(settings.approvals_markdown_path)
    return SQLiteApprovalStore(settings.approvals_db_path)


__all__ = [
    "ApprovalStore",
    "MarkdownApprovalStore",
    "SQLiteApprovalStore",
    "build_store",
    "parse_markdown",
    "render_block",
    "render_markdown",
]
