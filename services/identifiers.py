"""Derive one candidate identifier per identity source from a raw profile.

GitHub and ORCID identifiers come from a profile URL when one is present
(exact) and otherwise from a search against the source (heuristic). The
remaining sources reuse the GitHub username or the person's name.
Resolution never raises: a failure means "no identifier" for that source.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from models import RawProfile, SourceKind
from services.domain_utils import (
    extract_github_username,
    extract_orcid_id,
    find_profile_url,
    name_slug,
)
from sources.base import Identifier
from sources.github import GitHubSource
from sources.orcid import OrcidSource

logger = logging.getLogger(__name__)


def _profile_urls(raw: RawProfile, primary: Optional[str]) -> List[Optional[str]]:
    return [primary, *raw.profile_urls, raw.website_url]


def resolve_github(raw: RawProfile, source: Optional[GitHubSource] = None) -> Optional[Identifier]:
    url = find_profile_url(_profile_urls(raw, raw.github_url), "github.com")
    username = extract_github_username(url)
    if username:
        return Identifier(username, exact=True)
    if not raw.email:
        return None
    source = source or GitHubSource()
    try:
        login = source.search_by_email(raw.email)
    except Exception as e:  # noqa: BLE001
        logger.warning("GitHub email search failed", extra={"step": "resolve", "provider": "github", "error": str(e)})
        return None
    return Identifier(login, exact=False) if login else None


def resolve_orcid(raw: RawProfile, source: Optional[OrcidSource] = None) -> Optional[Identifier]:
    url = find_profile_url(_profile_urls(raw, raw.orcid_url), "orcid.org")
    orcid_id = extract_orcid_id(url)
    if orcid_id:
        return Identifier(orcid_id, exact=True)
    if not raw.name:
        return None
    source = source or OrcidSource()
    try:
        found = source.search_by_name(raw.name)
    except Exception as e:  # noqa: BLE001
        logger.warning("ORCID name search failed", extra={"step": "resolve", "provider": "orcid", "error": str(e)})
        return None
    return Identifier(found, exact=False) if found else None


def resolve_identifiers(
    raw: RawProfile,
    github_token: Optional[str] = None,
    *,
    github: Optional[GitHubSource] = None,
    orcid: Optional[OrcidSource] = None,
) -> Dict[SourceKind, Identifier]:
    """Return at most one identifier per source, keyed by :class:`SourceKind`.

    *github_token* authenticates the GitHub email search when no source is given.
    """
    resolved: Dict[SourceKind, Identifier] = {}

    gh = resolve_github(raw, github or GitHubSource(token=github_token))
    if gh:
        resolved[SourceKind.GITHUB] = gh
        resolved[SourceKind.GITLAB] = Identifier(gh.value, exact=False)

    orc = resolve_orcid(raw, orcid)
    if orc:
        resolved[SourceKind.ORCID] = orc

    if raw.name:
        resolved[SourceKind.STACKOVERFLOW] = Identifier(raw.name, exact=False)
        resolved[SourceKind.WIKIDATA] = Identifier(raw.name, exact=False)
        slug = name_slug(raw.name)
        if slug:
            resolved[SourceKind.DEVTO] = Identifier(slug, exact=False)

    logger.info(
        "Resolved %d identifiers: %s",
        len(resolved),
        ", ".join(k.value for k in resolved),
        extra={"step": "resolve"},
    )
    return resolved
