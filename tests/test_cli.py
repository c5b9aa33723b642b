from __future__ import annotations

import json
import sys
from typing import List

import pytest
import requests

from models import RawProfile


def _run_cli_with_args(args_list: List[str]) -> None:
    argv_backup = sys.argv[:]
    try:
        sys.argv = ["cli.py"] + args_list
        if "cli" in sys.modules:
            del sys.modules["cli"]
        import cli  # type: ignore
        try:
            cli.main()  # type: ignore[attr-defined]
        except SystemExit as e:
            code = int(getattr(e, "code", 0) or 0)
            if code not in (0, None):
                raise
    finally:
        sys.argv = argv_backup


class _NotFound:
    status_code = 404


@pytest.fixture()
def offline(monkeypatch):
    calls = []

    def fake_get(url, **kwargs):
        calls.append(url)
        return _NotFound()

    monkeypatch.setattr(requests, "get", fake_get)
    return calls


def test_process_then_list_search_and_export(tmp_path, monkeypatch, capsys, offline):
    import services.document_extractor as de
    monkeypatch.setattr(
        de.DocumentExtractor,
        "extract",
        lambda self, file_bytes, mime_type, api_key, filename="document": RawProfile(name="Jane Doe", email="jane@acme.io", company="Acme"),
    )
    db_path = tmp_path / "cli.db"
    doc = tmp_path / "card.txt"
    doc.write_text("Jane Doe, Acme", encoding="utf-8")

    _run_cli_with_args(["--db", str(db_path), "bootstrap"])
    _run_cli_with_args(["--db", str(db_path), "set-key", "--user", "u1", "--service", "openai", "--value", "sk-test"])
    capsys.readouterr()

    _run_cli_with_args(["--db", str(db_path), "process", "--user", "u1", "--file", str(doc)])
    out = capsys.readouterr().out
    assert "Status: completed" in out
    # Every source missed, but lookups were attempted
    assert offline

    _run_cli_with_args(["--db", str(db_path), "contacts", "--user", "u1"])
    contacts = json.loads(capsys.readouterr().out)
    assert [c["name"] for c in contacts] == ["Jane Doe"]
    assert contacts[0]["sources"] == [{"source": "document", "url": "uploaded_document", "verified": False}]
    assert "enriched_data" not in contacts[0]

    _run_cli_with_args(["--db", str(db_path), "report-contact", "--user", "u1", "--id", contacts[0]["id"]])
    report = json.loads(capsys.readouterr().out)
    assert report["extracted_data"]["name"] == "Jane Doe"

    _run_cli_with_args(["--db", str(db_path), "search", "--user", "u1", "-q", "acme"])
    assert [c["name"] for c in json.loads(capsys.readouterr().out)] == ["Jane Doe"]

    _run_cli_with_args(["--db", str(db_path), "export", "--user", "u1", "--format", "csv"])
    csv_out = capsys.readouterr().out
    assert csv_out.splitlines()[0] == "Name,Email,Phone,Company,Title,Location"
    assert "Jane Doe,jane@acme.io,,Acme,," in csv_out

    vcf = tmp_path / "out.vcf"
    _run_cli_with_args(["--db", str(db_path), "export", "--user", "u1", "--format", "vcard", "-o", str(vcf)])
    assert "FN:Jane Doe" in vcf.read_text(encoding="utf-8")


def test_process_without_key_marks_document_failed(tmp_path, capsys, offline):
    db_path = tmp_path / "cli_fail.db"
    doc = tmp_path / "card.txt"
    doc.write_text("Jane Doe", encoding="utf-8")

    _run_cli_with_args(["--db", str(db_path), "process", "--user", "u1", "--file", str(doc)])
    assert "Status: failed" in capsys.readouterr().out

    _run_cli_with_args(["--db", str(db_path), "documents", "--user", "u1"])
    docs = json.loads(capsys.readouterr().out)
    assert docs[0]["status"] == "failed"
    assert docs[0]["contact_id"] is None
    # No lookups happen when extraction cannot start
    assert offline == []


def test_process_rejects_unsupported_type(tmp_path, capsys):
    db_path = tmp_path / "cli_type.db"
    doc = tmp_path / "archive.zip"
    doc.write_bytes(b"PK\x03\x04")

    _run_cli_with_args(["--db", str(db_path), "process", "--user", "u1", "--file", str(doc)])
    assert "Unsupported file type" in capsys.readouterr().out


def test_keys_listing_hides_values(tmp_path, capsys):
    db_path = tmp_path / "cli_keys.db"
    _run_cli_with_args(["--db", str(db_path), "set-key", "--user", "u1", "--service", "github", "--value", "ghp_secret"])
    capsys.readouterr()
    _run_cli_with_args(["--db", str(db_path), "keys", "--user", "u1"])
    out = capsys.readouterr().out
    assert "ghp_secret" not in out
    assert json.loads(out)[0]["service"] == "github"
    _run_cli_with_args(["--db", str(db_path), "delete-key", "--user", "u1", "--service", "github"])
    assert "Deleted" in capsys.readouterr().out
