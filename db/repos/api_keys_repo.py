from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Dict, List, Optional


class ApiKeysRepo:
    """Per-user credentials for third-party services.

    Values are stored as given in ``encrypted_value``; encryption at rest
    belongs to whatever writes them.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def upsert_key(self, user_id: str, service: str, value: str, key_name: str = "api_key") -> str:
        """Insert or replace the credential for (user, service, key_name); returns its id."""
        sql = (
            "INSERT INTO api_keys (id, user_id, service, key_name, encrypted_value) "
            "VALUES (?, ?, ?, ?, ?) "
            "ON CONFLICT(user_id, service, key_name) DO UPDATE SET "
            " encrypted_value = excluded.encrypted_value, "
            " is_valid = 1, "
            " updated_at = datetime('now') "
            "RETURNING id;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, (uuid.uuid4().hex, user_id, service, key_name, value))
        row = cur.fetchone()
        self.conn.commit()
        return str(row[0])

    def get_credential(self, user_id: str, service: str, key_name: str = "api_key") -> Optional[str]:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT encrypted_value FROM api_keys WHERE user_id = ? AND service = ? AND key_name = ? AND is_valid = 1",
            (user_id, service, key_name),
        )
        row = cur.fetchone()
        return str(row[0]) if row and row[0] else None

    def list_keys(self, user_id: str) -> List[Dict[str, Any]]:
        """Key metadata only; values are never listed."""
        cur = self.conn.cursor()
        cur.execute(
            "SELECT id, service, key_name, is_valid, last_validated, created_at, updated_at FROM api_keys WHERE user_id = ? ORDER BY service, key_name",
            (user_id,),
        )
        names = [d[0] for d in cur.description]
        return [dict(zip(names, row)) for row in cur.fetchall()]

    def delete_key(self, user_id: str, service: str, key_name: str = "api_key") -> bool:
        cur = self.conn.execute(
            "DELETE FROM api_keys WHERE user_id = ? AND service = ? AND key_name = ?",
            (user_id, service, key_name),
        )
        self.conn.commit()
        return cur.rowcount > 0
