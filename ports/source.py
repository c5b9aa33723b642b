from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from models import EnrichmentRecord, SourceKind

if TYPE_CHECKING:
    from sources.base import Identifier, LookupResult


class IdentitySourcePort(Protocol):
    source_kind: SourceKind

    def fetch(self, identifier: "Identifier") -> "LookupResult":
        ...

    def lookup(self, identifier: "Identifier") -> Optional[EnrichmentRecord]:
        ...
