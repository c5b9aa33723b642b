from __future__ import annotations

import pytest

from models import EnrichedProfile, SourceRef
from services.scoring import is_valid_email, score


def test_empty_profile_scores_base():
    assert score([], EnrichedProfile()) == pytest.approx(0.5)


def test_scenario_a_formula():
    merged = EnrichedProfile(name="Jane Doe", company="Acme", bio="ML engineer", skills=["Python"], github_url="https://github.com/janedoe")
    sources = [
        SourceRef(source="document", url="uploaded_document", verified=False),
        SourceRef(source="github", url="https://github.com/janedoe", verified=True),
    ]
    expected = 0.5 + 0.15 + 0.2 * (3 / 7) + 0.05
    assert score(sources, merged) == pytest.approx(expected)


def test_score_is_capped_at_one():
    merged = EnrichedProfile(
        name="A", email="a@b.co", phone="1", company="C", title="T", location="L", bio="B",
        github_url="g", linkedin_url="l", orcid_url="o",
    )
    sources = [SourceRef(source="github", url="u", verified=True)] * 4
    assert score(sources, merged) == 1.0


def test_score_is_order_independent():
    merged = EnrichedProfile(name="A", email="a@b.co")
    a = SourceRef(source="github", url="u", verified=True)
    b = SourceRef(source="orcid", url="v", verified=False)
    assert score([a, b], merged) == score([b, a], merged)


@pytest.mark.parametrize("email, valid", [
    ("jane@acme.io", True),
    ("jane@acme", False),
    ("jane acme@x.io", False),
    (None, False),
])
def test_email_pattern(email, valid):
    assert is_valid_email(email) is valid


def test_invalid_email_counts_for_coverage_but_not_bonus():
    with_invalid = score([], EnrichedProfile(email="not-an-email"))
    assert with_invalid == pytest.approx(0.5 + 0.2 / 7)
