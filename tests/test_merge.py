from __future__ import annotations

from models import EnrichmentRecord, PartialProfile, RawProfile, SourceKind
from services.merge import merge, order_records, union


def _rec(kind: SourceKind, verified: bool = False, **data) -> EnrichmentRecord:
    return EnrichmentRecord(source=kind, url=f"https://{kind.value}.example/x", verified=verified, data=PartialProfile(**data))


def test_raw_values_are_never_overwritten():
    raw = RawProfile(name="Jane Doe", company="Raw Co")
    out = merge(raw, [_rec(SourceKind.GITHUB, name="J. Doe", company="Acme", bio="ML engineer")])
    assert out.name == "Jane Doe"
    assert out.company == "Raw Co"
    assert out.bio == "ML engineer"


def test_precedence_is_fixed_regardless_of_collection_order():
    raw = RawProfile(name="Jane Doe")
    github = _rec(SourceKind.GITHUB, location="Berlin")
    devto = _rec(SourceKind.DEVTO, location="Paris")
    stack = _rec(SourceKind.STACKOVERFLOW, location="Rome")

    forward = merge(raw, [github, stack, devto])
    backward = merge(raw, [devto, stack, github])

    assert forward.location == backward.location == "Berlin"


def test_blank_strings_count_as_empty():
    raw = RawProfile(name="Jane Doe", title="   ")
    out = merge(raw, [_rec(SourceKind.ORCID, title="Professor")])
    assert out.title == "Professor"


def test_skills_union_dedupes_in_first_seen_order():
    raw = RawProfile(skills=["Python", "SQL"])
    out = merge(raw, [
        _rec(SourceKind.GITHUB, skills=["Go", "Python"]),
        _rec(SourceKind.GITLAB, skills=["SQL", "Rust"]),
    ])
    assert out.skills == ["Python", "SQL", "Go", "Rust"]


def test_nested_fields_are_attached_verbatim():
    repos = [{"name": "a", "language": "Python"}]
    out = merge(RawProfile(name="Jane"), [_rec(SourceKind.GITHUB, repositories=repos)])
    assert out.repositories == repos
    assert out.publications is None


def test_document_records_are_ignored_by_merge():
    raw = RawProfile(name="Jane")
    doc = _rec(SourceKind.DOCUMENT, company="From Document")
    out = merge(raw, [doc])
    assert out.company is None
    assert order_records([doc]) == []


def test_merge_is_idempotent_and_pure():
    raw = RawProfile(name="Jane Doe", skills=["Python"])
    records = [_rec(SourceKind.GITHUB, verified=True, bio="ML", skills=["Go"]), _rec(SourceKind.ORCID, title="Dr")]
    first = merge(raw, records)
    second = merge(raw, records)
    assert first == second
    assert first.sources == []
    assert first.confidence_score == 0.0
    assert raw.skills == ["Python"]


def test_union_keeps_unhashable_items():
    assert union([{"a": 1}], [{"a": 1}, {"b": 2}]) == [{"a": 1}, {"b": 2}]


def test_merge_without_records_keeps_every_raw_field():
    raw = RawProfile(
        name="Jane Doe",
        email="jane@acme.io",
        phone="+1 555 0100",
        company="Acme",
        title="Engineer",
        location="Berlin",
        bio="Builds things",
        linkedinUrl="https://linkedin.com/in/janedoe",
        githubUrl="https://github.com/janedoe",
        orcidUrl="https://orcid.org/0000-0002-1825-0097",
        websiteUrl="https://jane.dev",
        twitterUrl="https://twitter.com/jane",
        skills=["Python", "Go"],
        education=["MSc Physics"],
        experience=[{"company": "Acme", "title": "Engineer", "duration": "2020-2024"}],
        profileUrls=["https://mastodon.social/@jane"],
    )

    out = merge(raw, [])

    dumped = out.model_dump()
    assert {k: dumped[k] for k in raw.model_dump()} == raw.model_dump()
    assert out.sources == []


def test_profile_urls_gain_matched_source_urls():
    raw = RawProfile(name="Jane", profileUrls=["https://mastodon.social/@jane"])
    out = merge(raw, [_rec(SourceKind.DEVTO), _rec(SourceKind.GITHUB)])
    assert out.profile_urls == [
        "https://mastodon.social/@jane",
        "https://github.example/x",
        "https://devto.example/x",
    ]


def test_skills_union_matches_set_of_both_inputs():
    out = merge(RawProfile(skills=["Go"]), [_rec(SourceKind.GITHUB, skills=["Go", "Rust"])])
    assert set(out.skills) == {"Go", "Rust"}
    assert len(out.skills) == 2
