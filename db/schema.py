from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create schema and indexes (idempotent)."""
    cur = conn.cursor()

    # Per-user third-party credentials (service + key_name unique per user)
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS api_keys (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  user_id TEXT NOT NULL,\n"
            "  service TEXT NOT NULL,\n"
            "  key_name TEXT NOT NULL,\n"
            "  encrypted_value TEXT NOT NULL,\n"
            "  is_valid INTEGER NOT NULL DEFAULT 1,\n"
            "  last_validated TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  UNIQUE(user_id, service, key_name)\n"
            ")"
        )
    )

    # Contacts: flattened enriched profile plus verbatim raw/enriched JSON
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS contacts (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  user_id TEXT NOT NULL,\n"
            "  name TEXT NOT NULL,\n"
            "  email TEXT,\n"
            "  phone TEXT,\n"
            "  company TEXT,\n"
            "  title TEXT,\n"
            "  location TEXT,\n"
            "  skills_json TEXT NOT NULL DEFAULT '[]',\n"
            "  linkedin_url TEXT,\n"
            "  github_url TEXT,\n"
            "  orcid_url TEXT,\n"
            "  twitter_url TEXT,\n"
            "  website_url TEXT,\n"
            "  bio TEXT,\n"
            "  confidence_score REAL NOT NULL DEFAULT 0 CHECK (confidence_score >= 0 AND confidence_score <= 1),\n"
            "  sources_json TEXT NOT NULL DEFAULT '[]',\n"
            "  extracted_data_json TEXT,\n"
            "  enriched_data_json TEXT,\n"
            "  tags_json TEXT NOT NULL DEFAULT '[]',\n"
            "  notes TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_contacts_user ON contacts(user_id);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_contacts_user_name ON contacts(user_id, name);")

    # Uploaded documents and their pipeline progress
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS documents (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  user_id TEXT NOT NULL,\n"
            "  filename TEXT NOT NULL,\n"
            "  original_name TEXT NOT NULL,\n"
            "  mime_type TEXT NOT NULL,\n"
            "  file_size INTEGER NOT NULL,\n"
            "  file_path TEXT NOT NULL,\n"
            "  status TEXT NOT NULL DEFAULT 'queued',\n"
            "  extraction_progress INTEGER NOT NULL DEFAULT 0,\n"
            "  contact_id TEXT,\n"
            "  error_message TEXT,\n"
            "  uploaded_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  FOREIGN KEY(contact_id) REFERENCES contacts(id) ON DELETE SET NULL\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_documents_user ON documents(user_id);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_documents_status ON documents(status);")

    conn.commit()
