from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from models import DocumentRecord, RunStage


_UPDATABLE = ("status", "extraction_progress", "contact_id", "error_message")


def _row_to_record(cur: sqlite3.Cursor, row: Any) -> DocumentRecord:
    names = [d[0] for d in cur.description]
    return DocumentRecord(**dict(zip(names, row)))


class DocumentsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create_document(
        self,
        user_id: str,
        original_name: str,
        mime_type: str,
        file_size: int,
        file_path: str,
        filename: Optional[str] = None,
    ) -> DocumentRecord:
        """Register an uploaded file in the queued state; returns the new row."""
        document_id = uuid.uuid4().hex
        self.conn.execute(
            (
                "INSERT INTO documents (id, user_id, filename, original_name, mime_type, file_size, file_path, status, extraction_progress) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0)"
            ),
            (document_id, user_id, filename or original_name, original_name, mime_type, int(file_size), file_path, RunStage.QUEUED.value),
        )
        self.conn.commit()
        created = self.get_document(document_id, user_id)
        assert created is not None
        return created

    def get_document(self, document_id: str, user_id: str) -> Optional[DocumentRecord]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM documents WHERE id = ? AND user_id = ?", (document_id, user_id))
        row = cur.fetchone()
        return _row_to_record(cur, row) if row else None

    def list_documents(self, user_id: str) -> List[DocumentRecord]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM documents WHERE user_id = ? ORDER BY uploaded_at DESC, rowid DESC", (user_id,))
        return [_row_to_record(cur, row) for row in cur.fetchall()]

    def update_document(self, document_id: str, user_id: str, fields: Dict[str, Any]) -> Optional[DocumentRecord]:
        cols: Dict[str, Any] = {}
        for key in _UPDATABLE:
            if key in fields:
                value = fields[key]
                cols[key] = value.value if isinstance(value, RunStage) else value
        if cols:
            assignments = ", ".join(f"{c} = ?" for c in cols)
            self.conn.execute(
                f"UPDATE documents SET {assignments}, updated_at = datetime('now') WHERE id = ? AND user_id = ?",
                (*cols.values(), document_id, user_id),
            )
            self.conn.commit()
        return self.get_document(document_id, user_id)

    def delete_document(self, document_id: str, user_id: str) -> bool:
        cur = self.conn.execute("DELETE FROM documents WHERE id = ? AND user_id = ?", (document_id, user_id))
        self.conn.commit()
        return cur.rowcount > 0
