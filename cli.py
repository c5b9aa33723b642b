import argparse
import json
import mimetypes
import os
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.api_keys_repo import ApiKeysRepo
from db.repos.contacts_repo import ContactsRepo
from db.repos.documents_repo import DocumentsRepo
from pipelines.process_document import process_document
from services.contact_search import semantic_search
from services.credentials import CredentialStore
from services.document_extractor import UnsupportedDocumentError, validate_upload
from services.export import contacts_to_csv, contacts_to_vcard
from services.reporting import print_summary
from utils.logging_setup import init_logging


def _open(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    return conn


def _dump(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def cmd_bootstrap(args):
    _open(args)
    print("Schema ready")


def cmd_set_key(args):
    conn = _open(args)
    ApiKeysRepo(conn).upsert_key(args.user, args.service, args.value, key_name=args.key_name)
    print(f"Stored {args.service}/{args.key_name} for {args.user}")


def cmd_keys(args):
    conn = _open(args)
    _dump(ApiKeysRepo(conn).list_keys(args.user))


def cmd_delete_key(args):
    conn = _open(args)
    removed = ApiKeysRepo(conn).delete_key(args.user, args.service, key_name=args.key_name)
    print("Deleted" if removed else "No such key")


def cmd_process(args):
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    path = Path(args.file).resolve()
    if not path.is_file():
        print(f"File not found: {path}")
        return
    mime_type = args.mime or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    size = path.stat().st_size
    try:
        validate_upload(mime_type, size)
    except UnsupportedDocumentError as e:
        print(str(e))
        return

    conn = _open(args)
    doc = DocumentsRepo(conn).create_document(args.user, path.name, mime_type, size, str(path))
    ctx = process_document(conn, doc.id, args.user)
    meta = ctx.meta if ctx is not None else {"status": "skipped"}
    print_summary(doc.id, meta, ctx.contact if ctx is not None else None)


def cmd_documents(args):
    conn = _open(args)
    _dump([d.model_dump(mode="json") for d in DocumentsRepo(conn).list_documents(args.user)])


def cmd_contacts(args):
    conn = _open(args)
    contacts = ContactsRepo(conn).list_contacts(args.user)
    _dump([c.model_dump(mode="json", exclude={"extracted_data", "enriched_data"}) for c in contacts])


def cmd_report_contact(args):
    conn = _open(args)
    contact = ContactsRepo(conn).get_contact(args.id, args.user)
    if not contact:
        print("No record found for contact")
        return
    _dump(contact.model_dump(mode="json"))


def cmd_delete_contact(args):
    conn = _open(args)
    removed = ContactsRepo(conn).delete_contact(args.id, args.user)
    print("Deleted" if removed else "No record found for contact")


def cmd_search(args):
    conn = _open(args)
    repo = ContactsRepo(conn)
    if args.semantic:
        api_key = CredentialStore(ApiKeysRepo(conn)).get_credential(args.user, "openai", "api_key")
        results = semantic_search(args.query, repo.list_contacts(args.user), api_key=api_key)
    else:
        results = repo.search_contacts(args.user, args.query)
    _dump([
        {"id": c.id, "name": c.name, "title": c.title, "company": c.company, "email": c.email, "confidence_score": c.confidence_score}
        for c in results
    ])


def cmd_export(args):
    conn = _open(args)
    contacts = ContactsRepo(conn).list_contacts(args.user)
    if args.format == "vcard":
        text = contacts_to_vcard(contacts, ids=args.ids)
    else:
        text = contacts_to_csv(c for c in contacts if not args.ids or c.id in args.ids)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8", newline="")
        print(f"Wrote {args.output}")
    else:
        print(text, end="")


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Contact Intel CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_key = sub.add_parser("set-key", help="Store a per-user API key (openai, github, gitlab, huggingface)")
    p_key.add_argument("--user", required=True)
    p_key.add_argument("--service", required=True, choices=["openai", "github", "gitlab", "huggingface"])
    p_key.add_argument("--key-name", default="api_key")
    p_key.add_argument("--value", required=True)
    p_key.set_defaults(func=cmd_set_key)

    p_keys = sub.add_parser("keys", help="List stored key metadata for a user")
    p_keys.add_argument("--user", required=True)
    p_keys.set_defaults(func=cmd_keys)

    p_dk = sub.add_parser("delete-key", help="Remove a stored API key")
    p_dk.add_argument("--user", required=True)
    p_dk.add_argument("--service", required=True)
    p_dk.add_argument("--key-name", default="api_key")
    p_dk.set_defaults(func=cmd_delete_key)

    p_proc = sub.add_parser("process", help="Extract, enrich, dedupe and score a document")
    p_proc.add_argument("--user", required=True)
    p_proc.add_argument("--file", required=True, help="Path to the document (pdf, docx, png, jpeg, txt)")
    p_proc.add_argument("--mime", default=None, help="Override the detected mime type")
    p_proc.set_defaults(func=cmd_process)

    p_docs = sub.add_parser("documents", help="List a user's documents and their progress")
    p_docs.add_argument("--user", required=True)
    p_docs.set_defaults(func=cmd_documents)

    p_con = sub.add_parser("contacts", help="List a user's contacts as JSON")
    p_con.add_argument("--user", required=True)
    p_con.set_defaults(func=cmd_contacts)

    p_rc = sub.add_parser("report-contact", help="Show one contact with raw and enriched data")
    p_rc.add_argument("--user", required=True)
    p_rc.add_argument("--id", required=True)
    p_rc.set_defaults(func=cmd_report_contact)

    p_dc = sub.add_parser("delete-contact", help="Delete one contact")
    p_dc.add_argument("--user", required=True)
    p_dc.add_argument("--id", required=True)
    p_dc.set_defaults(func=cmd_delete_contact)

    p_s = sub.add_parser("search", help="Search contacts by text, or rank them with --semantic")
    p_s.add_argument("--user", required=True)
    p_s.add_argument("--query", "-q", required=True)
    p_s.add_argument("--semantic", action="store_true", help="Rank with the LLM (falls back to all contacts)")
    p_s.set_defaults(func=cmd_search)

    p_ex = sub.add_parser("export", help="Export contacts as CSV or vCard")
    p_ex.add_argument("--user", required=True)
    p_ex.add_argument("--format", choices=["csv", "vcard"], default="csv")
    p_ex.add_argument("--ids", nargs="+", default=None, help="Restrict to these contact ids")
    p_ex.add_argument("--output", "-o", default=None, help="Write to file instead of stdout")
    p_ex.set_defaults(func=cmd_export)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
