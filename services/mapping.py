from __future__ import annotations

from typing import Any, Dict, Optional

from models import SCALAR_FIELDS, UNKNOWN_NAME, EnrichedProfile, RawProfile


def to_contact_fields(enriched: EnrichedProfile, raw: Optional[RawProfile] = None) -> Dict[str, Any]:
    """Flatten an enriched profile into contact columns.

    The verbatim raw and enriched profiles are kept alongside the flattened columns.
    """
    fields: Dict[str, Any] = {key: getattr(enriched, key) for key in SCALAR_FIELDS}
    fields["name"] = enriched.name or UNKNOWN_NAME
    fields["skills"] = list(enriched.skills)
    fields["confidence_score"] = enriched.confidence_score
    fields["sources"] = [s.model_dump() for s in enriched.sources]
    fields["extracted_data"] = raw.model_dump(mode="json", by_alias=True) if raw is not None else None
    fields["enriched_data"] = enriched.model_dump(mode="json")
    return fields
