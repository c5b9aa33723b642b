from __future__ import annotations

import sqlite3

import pytest

from db import schema
from db.repos.api_keys_repo import ApiKeysRepo
from services.credentials import CredentialStore, MissingCredentialError


def test_user_key_wins_over_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    from config.settings import get_settings
    get_settings.cache_clear()

    conn = sqlite3.connect(str(tmp_path / "k.db"))
    try:
        schema.bootstrap(conn)
        repo = ApiKeysRepo(conn)
        store = CredentialStore(repo)
        assert store.get_credential("u1", "openai") == "sk-env"
        repo.upsert_key("u1", "openai", "sk-user")
        assert store.get_credential("u1", "openai") == "sk-user"
    finally:
        conn.close()


def test_require_raises_when_missing():
    store = CredentialStore()
    assert store.get_credential("u1", "huggingface") is None
    with pytest.raises(MissingCredentialError) as exc:
        store.require("u1", "openai")
    assert exc.value.service == "openai"


def test_unknown_service_has_no_env_fallback():
    assert CredentialStore().get_credential("u1", "nope") is None
