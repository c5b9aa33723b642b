"""Combine a raw profile with enrichment records into one canonical profile.

Precedence is fixed: the raw profile first, then records ordered by
``SOURCE_PRECEDENCE`` regardless of the order they were collected in.

- scalar fields: first non-empty value wins, never overwritten later
- ``skills`` / ``education``: union, de-duplicated by equality, first-seen order
- nested arrays (repositories, projects, ...): attached verbatim, last writer wins
- ``profile_urls``: the raw URLs followed by each matched source profile URL
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

from models import (
    NESTED_FIELDS,
    SCALAR_FIELDS,
    SOURCE_PRECEDENCE,
    UNION_FIELDS,
    EnrichedProfile,
    EnrichmentRecord,
    RawProfile,
    SourceKind,
)


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def union(*lists: Iterable[Any]) -> List[Any]:
    out: List[Any] = []
    for items in lists:
        for item in items or []:
            if item not in out:
                out.append(item)
    return out


def order_records(records: Sequence[EnrichmentRecord]) -> List[EnrichmentRecord]:
    """Sort records into merge precedence; document records are dropped."""
    rank = {kind: i for i, kind in enumerate(SOURCE_PRECEDENCE)}
    enrichers = [r for r in records if r.source != SourceKind.DOCUMENT]
    # sorted() is stable, so duplicates of one kind keep their relative order
    return sorted(enrichers, key=lambda r: rank.get(r.source, len(rank)))


def merge(raw: RawProfile, records: Sequence[EnrichmentRecord]) -> EnrichedProfile:
    merged: Dict[str, Any] = raw.model_dump(include=set(SCALAR_FIELDS) | set(UNION_FIELDS) | {"experience", "profile_urls"})
    for key in UNION_FIELDS:
        merged[key] = union(merged.get(key) or [])

    for record in order_records(records):
        data = record.data
        for key in SCALAR_FIELDS:
            if _is_empty(merged.get(key)):
                value = getattr(data, key)
                if not _is_empty(value):
                    merged[key] = value
        for key in UNION_FIELDS:
            merged[key] = union(merged[key], getattr(data, key))
        for key in NESTED_FIELDS:
            value = getattr(data, key)
            if value is not None:
                merged[key] = list(value)
        merged["profile_urls"] = union(merged["profile_urls"], [record.url])

    return EnrichedProfile(**merged)
