from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from config.settings import get_settings


def get_connection(db_path: Optional[str] = None, timeout: float = 30.0) -> sqlite3.Connection:
    """Open the contacts database, creating its directory on first use.

    Enrichment lookups run on worker threads but every write goes through the
    caller's connection, so a single connection per run is enough. WAL keeps
    CLI readers (``documents``, ``contacts``) from blocking a run in flight.
    """
    path = db_path or get_settings().db_path
    if path != ":memory:":
        Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, timeout=timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    # documents.contact_id relies on ON DELETE SET NULL
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn
