from __future__ import annotations

import re
from typing import Iterable, Optional
from urllib.parse import unquote

import tldextract


GITHUB_USERNAME_RE = re.compile(r"github\.com/([^/?#\s]+)", re.IGNORECASE)
ORCID_ID_RE = re.compile(r"orcid\.org/(\d{4}-\d{4}-\d{4}-\d{3}[0-9X])", re.IGNORECASE)

# github.com paths that are never user profiles
_GITHUB_RESERVED = {"orgs", "topics", "features", "about", "search", "marketplace", "settings", "login"}

# offline extractor: never fetch the public suffix list at runtime
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


def extract_apex_domain(url_or_domain: Optional[str]) -> Optional[str]:
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text.startswith("http://") and not text.startswith("https://"):
        text = f"http://{text}"
    ext = _EXTRACT(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None


def extract_github_username(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    m = GITHUB_USERNAME_RE.search(url)
    if not m:
        return None
    username = unquote(m.group(1)).strip()
    if not username or username.lower() in _GITHUB_RESERVED:
        return None
    return username


def extract_orcid_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    m = ORCID_ID_RE.search(url)
    return m.group(1).upper() if m else None


def find_profile_url(urls: Iterable[Optional[str]], apex: str) -> Optional[str]:
    """Return the first URL whose registered domain equals *apex* (e.g. ``github.com``)."""
    for url in urls:
        if url and extract_apex_domain(url) == apex:
            return url
    return None


def name_slug(name: Optional[str]) -> Optional[str]:
    """Slug-style handle guess: lower-case with all whitespace removed."""
    if not name:
        return None
    slug = re.sub(r"\s+", "", name.lower())
    return slug or None
