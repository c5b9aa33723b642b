from __future__ import annotations

import json
import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from models import UNKNOWN_NAME, ContactRecord


# Model field -> JSON TEXT column
_JSON_COLUMNS = {
    "skills": "skills_json",
    "sources": "sources_json",
    "extracted_data": "extracted_data_json",
    "enriched_data": "enriched_data_json",
    "tags": "tags_json",
}

_PLAIN_COLUMNS = (
    "name",
    "email",
    "phone",
    "company",
    "title",
    "location",
    "linkedin_url",
    "github_url",
    "orcid_url",
    "twitter_url",
    "website_url",
    "bio",
    "confidence_score",
    "notes",
)


def _to_columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    cols: Dict[str, Any] = {}
    for key, value in fields.items():
        if key in _JSON_COLUMNS:
            cols[_JSON_COLUMNS[key]] = None if value is None else json.dumps(value, ensure_ascii=False, default=str)
        elif key in _PLAIN_COLUMNS:
            cols[key] = value
    return cols


def _row_to_record(cur: sqlite3.Cursor, row: Any) -> ContactRecord:
    names = [d[0] for d in cur.description]
    data = dict(zip(names, row))
    for key, col in _JSON_COLUMNS.items():
        raw = data.pop(col, None)
        if raw is not None:
            data[key] = json.loads(raw)
    return ContactRecord(**data)


class ContactsRepo:
    """Contact CRUD scoped by (id, user_id). Append-only sources are the caller's job."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create_contact(self, user_id: str, fields: Dict[str, Any]) -> ContactRecord:
        contact_id = uuid.uuid4().hex
        cols = _to_columns({**fields, "name": fields.get("name") or UNKNOWN_NAME})
        names = ["id", "user_id", *cols.keys()]
        placeholders = ", ".join("?" for _ in names)
        self.conn.execute(
            f"INSERT INTO contacts ({', '.join(names)}) VALUES ({placeholders})",
            (contact_id, user_id, *cols.values()),
        )
        self.conn.commit()
        created = self.get_contact(contact_id, user_id)
        assert created is not None
        return created

    def get_contact(self, contact_id: str, user_id: str) -> Optional[ContactRecord]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM contacts WHERE id = ? AND user_id = ?", (contact_id, user_id))
        row = cur.fetchone()
        return _row_to_record(cur, row) if row else None

    def list_contacts(self, user_id: str) -> List[ContactRecord]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM contacts WHERE user_id = ? ORDER BY created_at DESC, rowid DESC", (user_id,))
        return [_row_to_record(cur, row) for row in cur.fetchall()]

    def update_contact(self, contact_id: str, user_id: str, fields: Dict[str, Any]) -> Optional[ContactRecord]:
        """Partial update: only the given fields are written."""
        cols = _to_columns(fields)
        if cols:
            assignments = ", ".join(f"{c} = ?" for c in cols)
            self.conn.execute(
                f"UPDATE contacts SET {assignments}, updated_at = datetime('now') WHERE id = ? AND user_id = ?",
                (*cols.values(), contact_id, user_id),
            )
            self.conn.commit()
        return self.get_contact(contact_id, user_id)

    def delete_contact(self, contact_id: str, user_id: str) -> bool:
        cur = self.conn.execute("DELETE FROM contacts WHERE id = ? AND user_id = ?", (contact_id, user_id))
        self.conn.commit()
        return cur.rowcount > 0

    def search_contacts(self, user_id: str, query: str) -> List[ContactRecord]:
        """Case-insensitive substring match over name, email, company and title."""
        like = f"%{(query or '').strip().lower()}%"
        cur = self.conn.cursor()
        cur.execute(
            (
                "SELECT * FROM contacts WHERE user_id = ? AND ("
                " lower(name) LIKE ? OR lower(coalesce(email, '')) LIKE ?"
                " OR lower(coalesce(company, '')) LIKE ? OR lower(coalesce(title, '')) LIKE ?"
                ") ORDER BY created_at DESC, rowid DESC"
            ),
            (user_id, like, like, like, like),
        )
        return [_row_to_record(cur, row) for row in cur.fetchall()]
