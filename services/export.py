from __future__ import annotations

import csv
import io
from typing import Iterable, List, Optional

from models import ContactRecord


CSV_HEADERS = ["Name", "Email", "Phone", "Company", "Title", "Location"]


def contacts_to_csv(contacts: Iterable[ContactRecord]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for c in contacts:
        writer.writerow([c.name or "", c.email or "", c.phone or "", c.company or "", c.title or "", c.location or ""])
    return output.getvalue()


def _escape(value: str) -> str:
    # RFC 2426 text escaping
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def _split_name(name: str) -> tuple[str, str]:
    parts = name.strip().rsplit(" ", 1)
    if len(parts) == 2:
        return parts[1], parts[0]
    return parts[0], ""


def contact_to_vcard(contact: ContactRecord) -> str:
    family, given = _split_name(contact.name or "")
    lines: List[str] = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"N:{_escape(family)};{_escape(given)};;;",
        f"FN:{_escape(contact.name or '')}",
    ]
    if contact.email:
        lines.append(f"EMAIL;TYPE=INTERNET:{_escape(contact.email)}")
    if contact.phone:
        lines.append(f"TEL;TYPE=WORK,VOICE:{_escape(contact.phone)}")
    if contact.company:
        lines.append(f"ORG:{_escape(contact.company)}")
    if contact.title:
        lines.append(f"TITLE:{_escape(contact.title)}")
    if contact.location:
        lines.append(f"ADR;TYPE=WORK:;;;{_escape(contact.location)};;;")
    for url in (contact.website_url, contact.linkedin_url, contact.github_url, contact.orcid_url, contact.twitter_url):
        if url:
            lines.append(f"URL:{_escape(url)}")
    if contact.bio:
        lines.append(f"NOTE:{_escape(contact.bio)}")
    if contact.skills:
        lines.append(f"CATEGORIES:{','.join(_escape(s) for s in contact.skills)}")
    lines.append("END:VCARD")
    return "\r\n".join(lines) + "\r\n"


def contacts_to_vcard(contacts: Iterable[ContactRecord], ids: Optional[Iterable[str]] = None) -> str:
    """Concatenated vCard 3.0 entries, optionally restricted to *ids*."""
    wanted = set(ids) if ids is not None else None
    return "".join(contact_to_vcard(c) for c in contacts if wanted is None or c.id in wanted)
