from __future__ import annotations

from models import RawProfile, SourceKind
from services.domain_utils import extract_github_username, extract_orcid_id, name_slug
from services.identifiers import resolve_identifiers


class _StubGitHub:
    def __init__(self, login=None, exc=None):
        self.login = login
        self.exc = exc
        self.calls = []

    def search_by_email(self, email):
        self.calls.append(email)
        if self.exc:
            raise self.exc
        return self.login


class _StubOrcid:
    def __init__(self, found=None, exc=None):
        self.found = found
        self.exc = exc
        self.calls = []

    def search_by_name(self, name):
        self.calls.append(name)
        if self.exc:
            raise self.exc
        return self.found


def test_url_parsing_helpers():
    assert extract_github_username("https://github.com/janedoe") == "janedoe"
    assert extract_github_username("github.com/janedoe/repo?tab=x") == "janedoe"
    assert extract_github_username("https://github.com/orgs/acme") is None
    assert extract_orcid_id("https://orcid.org/0000-0002-1825-009x") == "0000-0002-1825-009X"
    assert extract_orcid_id("https://orcid.org/not-an-id") is None
    assert name_slug("  Jane  Van Doe ") == "janevandoe"


def test_github_url_gives_exact_identifier_without_search():
    gh = _StubGitHub(login="other")
    raw = RawProfile(name="Jane Doe", githubUrl="https://github.com/janedoe", email="jane@acme.io")

    ids = resolve_identifiers(raw, github=gh, orcid=_StubOrcid())

    assert ids[SourceKind.GITHUB].value == "janedoe"
    assert ids[SourceKind.GITHUB].exact is True
    assert gh.calls == []
    # GitLab reuses the GitHub handle as a guess
    assert ids[SourceKind.GITLAB].value == "janedoe"
    assert ids[SourceKind.GITLAB].exact is False


def test_github_falls_back_to_email_search():
    gh = _StubGitHub(login="jdoe42")
    raw = RawProfile(name="Jane Doe", email="jane@acme.io")

    ids = resolve_identifiers(raw, github=gh, orcid=_StubOrcid())

    assert gh.calls == ["jane@acme.io"]
    assert ids[SourceKind.GITHUB].value == "jdoe42"
    assert ids[SourceKind.GITHUB].exact is False


def test_profile_urls_list_is_scanned():
    raw = RawProfile(name="Jane Doe", profileUrls=["https://jane.dev", "https://orcid.org/0000-0002-1825-0097"])

    ids = resolve_identifiers(raw, github=_StubGitHub(), orcid=_StubOrcid(found="ignored"))

    assert ids[SourceKind.ORCID].value == "0000-0002-1825-0097"
    assert ids[SourceKind.ORCID].exact is True


def test_orcid_name_search_when_no_url():
    orc = _StubOrcid(found="0000-0001-0000-0001")
    raw = RawProfile(name="Jane Doe")

    ids = resolve_identifiers(raw, github=_StubGitHub(), orcid=orc)

    assert orc.calls == ["Jane Doe"]
    assert ids[SourceKind.ORCID].exact is False


def test_name_based_identifiers():
    raw = RawProfile(name="Jane Doe")

    ids = resolve_identifiers(raw, github=_StubGitHub(), orcid=_StubOrcid())

    assert ids[SourceKind.STACKOVERFLOW].value == "Jane Doe"
    assert ids[SourceKind.WIKIDATA].value == "Jane Doe"
    assert ids[SourceKind.DEVTO].value == "janedoe"
    assert SourceKind.GITHUB not in ids
    assert SourceKind.GITLAB not in ids


def test_resolver_never_raises_on_search_failure():
    raw = RawProfile(name="Jane Doe", email="jane@acme.io")

    ids = resolve_identifiers(
        raw,
        github=_StubGitHub(exc=RuntimeError("rate limited")),
        orcid=_StubOrcid(exc=ConnectionError("down")),
    )

    assert SourceKind.GITHUB not in ids
    assert SourceKind.ORCID not in ids
    assert SourceKind.STACKOVERFLOW in ids


def test_empty_profile_resolves_nothing():
    assert resolve_identifiers(RawProfile(), github=_StubGitHub(), orcid=_StubOrcid()) == {}
