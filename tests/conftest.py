from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.steps.enrich_profile'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    # Credentials from a developer .env must not leak into tests
    for key in ("OPENAI_API_KEY", "GITHUB_TOKEN", "GITLAB_TOKEN", "HF_API_KEY", "CALL_TRACE"):
        monkeypatch.setenv(key, "")
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
