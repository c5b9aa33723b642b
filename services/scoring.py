from __future__ import annotations

import re
from typing import Any, Sequence, Union

from models import ContactFields, EnrichmentRecord, SourceRef


BASE_SCORE = 0.5
VERIFIED_SOURCE_WEIGHT = 0.15
COVERAGE_WEIGHT = 0.2
EMAIL_BONUS = 0.05
PROFILE_URL_BONUS = 0.05

COVERAGE_FIELDS = ("name", "email", "phone", "company", "title", "location", "bio")
PROFILE_URL_FIELDS = ("github_url", "linkedin_url", "orcid_url")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and bool(EMAIL_RE.match(email))


def score(sources: Sequence[Union[EnrichmentRecord, SourceRef]], merged: ContactFields) -> float:
    """Bounded trust score in [0, 1] from source verification and field completeness.

    Additive and order-independent; the result is not rounded.
    """
    total = BASE_SCORE
    total += VERIFIED_SOURCE_WEIGHT * sum(1 for s in sources if s.verified)

    filled = sum(1 for f in COVERAGE_FIELDS if getattr(merged, f, None))
    total += COVERAGE_WEIGHT * (filled / len(COVERAGE_FIELDS))

    if is_valid_email(merged.email):
        total += EMAIL_BONUS
    for f in PROFILE_URL_FIELDS:
        if getattr(merged, f, None):
            total += PROFILE_URL_BONUS

    return max(0.0, min(total, 1.0))
