"""Approval gate - permission checks and the pending approval queue."""

from .gate import ApprovalGate, summarize_payload
from .notifier import LoggingNotifier, Notifier, WebhookNotifier
from .stores import ApprovalStore, MarkdownApprovalStore, SQLiteApprovalStore, build_store

__all__ = [
    "ApprovalGate",
    "ApprovalStore",
    "LoggingNotifier",
    "MarkdownApprovalStore",
    "Notifier",
    "SQLiteApprovalStore",
    "WebhookNotifier",
    "build_store",
    "summarize_payload",
]
