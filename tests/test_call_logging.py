from __future__ import annotations

import json

import pytest

from utils.call_logger import log_call, traced_call


def _enable_trace(tmp_path, monkeypatch):
    log_file = tmp_path / "external_calls.jsonl"
    monkeypatch.setenv("CALL_TRACE", "true")
    monkeypatch.setenv("CALL_LOG_PATH", str(log_file))
    monkeypatch.setenv("RUN_ID", "test-run-123")
    return log_file


def test_call_trace_writes_jsonl(tmp_path, monkeypatch):
    log_file = _enable_trace(tmp_path, monkeypatch)

    log_call(
        caller="unit.test",
        provider="openai",
        model="gpt-x",
        operation="document_extraction",
        prompt_hash="abc",
        duration_ms=42,
        status="ok",
        usage={"total_tokens": 10},
        extras={"prompt_name": "demo"},
    )

    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    rec = json.loads(lines[-1])
    assert rec["caller"] == "unit.test"
    assert rec["provider"] == "openai"
    assert rec["operation"] == "document_extraction"
    assert rec["run_id"] == "test-run-123"
    assert rec.get("usage", {}).get("total_tokens") == 10
    assert rec["extras"] == {"prompt_name": "demo"}


def test_trace_disabled_writes_nothing(tmp_path, monkeypatch):
    log_file = tmp_path / "none.jsonl"
    monkeypatch.setenv("CALL_LOG_PATH", str(log_file))
    log_call(caller="x", provider="github", operation="lookup")
    assert not log_file.exists()


def test_traced_call_records_errors_and_reraises(tmp_path, monkeypatch):
    log_file = _enable_trace(tmp_path, monkeypatch)

    with pytest.raises(RuntimeError):
        with traced_call(caller="similarity", provider="huggingface", operation="sentence_similarity"):
            raise RuntimeError("503 from upstream")
    with traced_call(caller="similarity", provider="huggingface", operation="sentence_similarity") as state:
        state["status"] = "ok"

    recs = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [r["status"] for r in recs] == ["error", "ok"]
    assert "503" in recs[0]["error"]
    assert all(isinstance(r["duration_ms"], int) for r in recs)


def test_lookups_are_traced(tmp_path, monkeypatch):
    log_file = _enable_trace(tmp_path, monkeypatch)
    import requests

    class _Resp:
        status_code = 404

    monkeypatch.setattr(requests, "get", lambda *a, **k: _Resp())
    from sources.github import GitHubSource
    from sources.base import Identifier

    assert GitHubSource().fetch(Identifier("ghost", exact=True)).status == "no_match"
    rec = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert rec["provider"] == "github"
    assert rec["operation"] == "lookup"
    assert rec["status"] == "no_match"


def test_log_lines_carry_run_id_and_defaults(monkeypatch):
    import logging

    from utils.logging_setup import SafeExtraFormatter

    monkeypatch.setenv("RUN_ID", "run-42")
    fmt = SafeExtraFormatter(fmt="%(message)s step=%(step)s document_id=%(document_id)s run_id=%(run_id)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    record.document_id = "doc-1"

    assert fmt.format(record) == "hello step=- document_id=doc-1 run_id=run-42"
