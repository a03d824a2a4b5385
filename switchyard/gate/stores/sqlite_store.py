"""SQLite approval store, the source of truth for the approval queue."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from ...core.domain.approvals import ApprovalItem, ApprovalStatus, format_approval_id
from ...core.errors import ApprovalStoreError
from .base import ApprovalStore

logger = logging.getLogger(__name__)

COLUMNS = (
    "id",
    "created_at",
    "status",
    "requesting_handler",
    "action",
    "requester_role",
    "payload_summary",
    "reason",
    "resolved_at",
    "resolved_by",
    "resolution_note",
)


class SQLiteApprovalStore(ApprovalStore):
    """One row per approval id; `seq` holds the numeric id suffix."""

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.init_db()

    @contextmanager
    def get_db(self) -> Generator[sqlite3.Connection, None, None]:
        """Open a connection, converting driver errors to ApprovalStoreError."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise ApprovalStoreError(f"Approval store error ({self.path}): {e}") from e
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the approvals table if it does not exist."""
        with self.get_db() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS approvals (
                    id TEXT PRIMARY KEY,
                    seq INTEGER NOT NULL UNIQUE,
                    created_at TEXT NOT NULL,
                    status TEXT NOT NULL,
                    requesting_handler TEXT NOT NULL,
                    action TEXT NOT NULL,
                    requester_role TEXT NOT NULL,
                    payload_summary TEXT,
                    reason TEXT,
                    resolved_at TEXT,
                    resolved_by TEXT,
                    resolution_note TEXT
                )
            ''')
            conn.execute('CREATE INDEX IF NOT EXISTS idx_approvals_status ON approvals(status)')

    def list_items(self) -> list[ApprovalItem]:
        with self.get_db() as conn:
            rows = conn.execute(
                f"SELECT {', '.join(COLUMNS)} FROM approvals ORDER BY seq"
            ).fetchall()
        return [self._to_item(row) for row in rows]

    def list_pending(self) -> list[ApprovalItem]:
        with self.get_db() as conn:
            rows = conn.execute(
                f"SELECT {', '.join(COLUMNS)} FROM approvals WHERE status = ? ORDER BY seq",
                (ApprovalStatus.PENDING.value,),
            ).fetchall()
        return [self._to_item(row) for row in rows]

    def get(self, approval_id: str) -> ApprovalItem | None:
        with self.get_db() as conn:
            row = conn.execute(
                f"SELECT {', '.join(COLUMNS)} FROM approvals WHERE id = ?",
                (approval_id,),
            ).fetchone()
        return self._to_item(row) if row else None

    def append(self, item: ApprovalItem) -> None:
        placeholders = ", ".join("?" for _ in COLUMNS)
        with self.get_db() as conn:
            conn.execute(
                f"INSERT INTO approvals (seq, {', '.join(COLUMNS)}) VALUES (?, {placeholders})",
                (
                    item.number,
                    item.id,
                    item.created_at,
                    item.status.value,
                    item.requesting_handler,
                    item.action,
                    item.requester_role,
                    item.payload_summary,
                    item.reason,
                    item.resolved_at,
                    item.resolved_by,
                    item.resolution_note,
                ),
            )

    def resolve(
        self,
        approval_id: str,
        status: ApprovalStatus,
        resolved_at: str,
        resolved_by: str,
        note: str,
    ) -> bool:
        with self.get_db() as conn:
            cursor = conn.execute(
                '''
                UPDATE approvals
                SET status = ?, resolved_at = ?, resolved_by = ?, resolution_note = ?
                WHERE id = ? AND status = ?
                ''',
                (
                    status.value,
                    resolved_at,
                    resolved_by,
                    note,
                    approval_id,
                    ApprovalStatus.PENDING.value,
                ),
            )
            return cursor.rowcount == 1

    def next_id(self) -> str:
        with self.get_db() as conn:
            (highest,) = conn.execute("SELECT COALESCE(MAX(seq), 0) FROM approvals").fetchone()
        return format_approval_id(highest + 1)

    @staticmethod
    def _to_item(row: sqlite3.Row) -> ApprovalItem:
        return ApprovalItem(**{column: row[column] for column in COLUMNS})
