# Importing the adapters registers them in sources.registry
from . import github, orcid, stackoverflow, wikidata, gitlab, devto  # noqa: F401
from .base import Identifier, IdentitySource, LookupResult
from .registry import available_sources, get_source

__all__ = [
    "Identifier",
    "IdentitySource",
    "LookupResult",
    "available_sources",
    "get_source",
]
