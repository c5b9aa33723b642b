"""Duplicate detection against a user's existing contacts.

The scan is linear and stops at the first contact whose similarity is
strictly above the threshold (first-over-threshold, not best match). A
failing similarity call counts as 0, so errors can only ever produce
"not a duplicate".
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from models import SCALAR_FIELDS, UNKNOWN_NAME, ContactFields, ContactRecord, EnrichedProfile
from ports.similarity import SimilarityPort
from services.merge import union

logger = logging.getLogger(__name__)


DUPLICATE_THRESHOLD = 0.85
COMPARISON_FIELDS = ("name", "email", "phone", "company", "title", "location")


@dataclass(frozen=True)
class DedupeResult:
    is_duplicate: bool
    matched_id: Optional[str] = None
    confidence: float = 1.0


def contact_text(data: Union[ContactFields, ContactRecord, Mapping[str, Any]]) -> str:
    """Flattened comparison string: ``name | email | ...``, lower-cased, empties omitted.

    The stored placeholder name counts as empty.
    """
    if isinstance(data, Mapping):
        values = [data.get(f) for f in COMPARISON_FIELDS]
    else:
        values = [getattr(data, f, None) for f in COMPARISON_FIELDS]
    if values[0] == UNKNOWN_NAME:
        values[0] = None
    return " | ".join(str(v) for v in values if v).lower()


def dedupe(
    candidate: EnrichedProfile,
    existing: Sequence[ContactRecord],
    similarity: SimilarityPort,
    threshold: float = DUPLICATE_THRESHOLD,
) -> DedupeResult:
    if not existing:
        return DedupeResult(is_duplicate=False, confidence=1.0)

    candidate_text = contact_text(candidate)
    for contact in existing:
        try:
            score = similarity.similarity(candidate_text, contact_text(contact))
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Similarity check failed for contact %s",
                contact.id,
                extra={"step": "dedupe", "status": "error", "provider": "similarity", "error": str(e)},
            )
            score = 0.0
        if score > threshold:
            logger.info("Duplicate of contact %s (similarity=%.3f)", contact.id, score, extra={"step": "dedupe", "status": "duplicate"})
            return DedupeResult(is_duplicate=True, matched_id=contact.id, confidence=score)

    return DedupeResult(is_duplicate=False, confidence=1.0)


def _non_empty(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v not in (None, "", [], {})}


def merge_into_existing(contact: ContactRecord, enriched: EnrichedProfile) -> Dict[str, Any]:
    """Partial update for a matched contact.

    Sources are appended, never replaced. Unlike the merge engine, newer
    non-empty values override stored ones so re-enrichment refreshes stale data.
    """
    new_enriched = enriched.model_dump(mode="json")
    fields: Dict[str, Any] = {
        "sources": [s.model_dump() for s in contact.sources] + new_enriched["sources"],
        "enriched_data": {**(contact.enriched_data or {}), **_non_empty(new_enriched)},
        "skills": union(contact.skills, enriched.skills),
    }
    fields["enriched_data"]["sources"] = fields["sources"]
    for key in SCALAR_FIELDS:
        value = getattr(enriched, key)
        if value:
            fields[key] = value
    if enriched.confidence_score:
        fields["confidence_score"] = enriched.confidence_score
    return fields
