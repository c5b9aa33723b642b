from __future__ import annotations

from models import ContactRecord, EnrichedProfile, SourceRef
from services.dedupe import contact_text, dedupe, merge_into_existing


class _Similarity:
    def __init__(self, scores):
        self.scores = list(scores)
        self.calls = []

    def similarity(self, a, b):
        self.calls.append((a, b))
        value = self.scores.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


def _contact(cid: str, **fields) -> ContactRecord:
    return ContactRecord(id=cid, user_id="u1", name=fields.pop("name", "Someone"), **fields)


def test_comparison_text_omits_empty_fields():
    profile = EnrichedProfile(name="Jane Doe", company="Acme", email=None)
    assert contact_text(profile) == "jane doe | acme"
    assert contact_text({"name": "X", "phone": "1"}) == "x | 1"


def test_placeholder_name_is_left_out_of_comparison():
    stored = _contact("a", name="Unknown", email="a@x.io")
    assert contact_text(stored) == "a@x.io"

    sim = _Similarity([0.1])
    dedupe(EnrichedProfile(email="b@y.io"), [stored], sim)
    assert sim.calls == [("b@y.io", "a@x.io")]


def test_empty_existing_list_makes_no_call():
    sim = _Similarity([])
    result = dedupe(EnrichedProfile(name="Jane"), [], sim)
    assert result.is_duplicate is False
    assert result.matched_id is None
    assert result.confidence == 1.0
    assert sim.calls == []


def test_threshold_is_strictly_greater():
    candidate = EnrichedProfile(name="Jane")
    assert dedupe(candidate, [_contact("c1")], _Similarity([0.85])).is_duplicate is False
    hit = dedupe(candidate, [_contact("c1")], _Similarity([0.850001]))
    assert hit.is_duplicate is True
    assert hit.matched_id == "c1"
    assert hit.confidence == 0.850001


def test_first_match_short_circuits():
    sim = _Similarity([0.1, 0.9, 0.99])
    result = dedupe(EnrichedProfile(name="Jane"), [_contact("a"), _contact("b"), _contact("c")], sim)
    assert result.matched_id == "b"
    assert len(sim.calls) == 2


def test_similarity_failure_counts_as_zero():
    sim = _Similarity([RuntimeError("503"), 0.2])
    result = dedupe(EnrichedProfile(name="Jane"), [_contact("a"), _contact("b")], sim)
    assert result.is_duplicate is False
    assert result.confidence == 1.0
    assert len(sim.calls) == 2


def test_similarity_service_down_never_reports_duplicate():
    sim = _Similarity([RuntimeError("503"), ConnectionError("reset"), TimeoutError("slow")])
    existing = [_contact("a", name="Jane Doe"), _contact("b", name="Jane Doe"), _contact("c", name="Jane Doe")]

    result = dedupe(EnrichedProfile(name="Jane Doe"), existing, sim)

    assert result.is_duplicate is False
    assert result.matched_id is None
    assert result.confidence == 1.0
    assert len(sim.calls) == 3


def test_merge_into_existing_appends_sources_and_refreshes_fields():
    existing = _contact(
        "c1",
        name="Jane Doe",
        company="Old Co",
        skills=["Python"],
        sources=[SourceRef(source="document", url="uploaded_document")],
        enriched_data={"name": "Jane Doe", "company": "Old Co", "notes_from_before": "keep"},
    )
    enriched = EnrichedProfile(
        name="Jane Doe",
        company="Acme",
        skills=["Go", "Python"],
        sources=[SourceRef(source="github", url="https://github.com/janedoe", verified=True)],
        confidence_score=0.8,
    )

    update = merge_into_existing(existing, enriched)

    assert [s["source"] for s in update["sources"]] == ["document", "github"]
    assert update["company"] == "Acme"
    assert update["skills"] == ["Python", "Go"]
    assert update["confidence_score"] == 0.8
    assert update["enriched_data"]["notes_from_before"] == "keep"
    assert update["enriched_data"]["company"] == "Acme"
    assert update["enriched_data"]["sources"] == update["sources"]
    # Empty values never clear stored ones
    assert "email" not in update
