from .profile_fields import ContactFields, SCALAR_FIELDS, UNION_FIELDS, NESTED_FIELDS
from .raw_profile import RawProfile
from .enrichment_record import (
    EnrichmentRecord,
    PartialProfile,
    SourceKind,
    SourceRef,
    SOURCE_PRECEDENCE,
)
from .enriched_profile import EnrichedProfile
from .contact_record import UNKNOWN_NAME, ContactRecord
from .document_record import DocumentRecord, RunStage, STAGE_PROGRESS, TERMINAL_STAGES

__all__ = [
    "ContactFields",
    "SCALAR_FIELDS",
    "UNION_FIELDS",
    "NESTED_FIELDS",
    "RawProfile",
    "EnrichmentRecord",
    "PartialProfile",
    "SourceKind",
    "SourceRef",
    "SOURCE_PRECEDENCE",
    "EnrichedProfile",
    "ContactRecord",
    "UNKNOWN_NAME",
    "DocumentRecord",
    "RunStage",
    "STAGE_PROGRESS",
    "TERMINAL_STAGES",
]
