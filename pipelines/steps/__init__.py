# Namespace for pipeline steps
from .extract_document import ExtractDocument  # noqa: F401
from .enrich_profile import EnrichProfile, MergeProfile  # noqa: F401
from .deduplicate_profile import DeduplicateProfile  # noqa: F401
from .score_profile import ScoreProfile  # noqa: F401
from .persist_contact import PersistContact  # noqa: F401
