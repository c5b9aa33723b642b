from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .profile_fields import ContactFields


class SourceKind(str, Enum):
    DOCUMENT = "document"
    GITHUB = "github"
    ORCID = "orcid"
    STACKOVERFLOW = "stackoverflow"
    WIKIDATA = "wikidata"
    GITLAB = "gitlab"
    DEVTO = "devto"


# Fixed merge precedence after the raw profile. Completion order of lookups never matters.
SOURCE_PRECEDENCE: tuple[SourceKind, ...] = (
    SourceKind.GITHUB,
    SourceKind.ORCID,
    SourceKind.STACKOVERFLOW,
    SourceKind.WIKIDATA,
    SourceKind.GITLAB,
    SourceKind.DEVTO,
)


class PartialProfile(ContactFields):
    """Normalized slice of a profile contributed by one source."""

    repositories: list[dict[str, Any]] | None = None
    projects: list[dict[str, Any]] | None = None
    articles: list[dict[str, Any]] | None = None
    publications: list[dict[str, Any]] | None = None
    employments: list[dict[str, Any]] | None = None
    extras: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class SourceRef(BaseModel):
    """Provenance-stripped form of an enrichment record, as stored on a contact."""

    source: str
    url: str
    verified: bool = False

    model_config = ConfigDict(extra="ignore")


class EnrichmentRecord(BaseModel):
    """One successful lookup against an external source."""

    source: SourceKind
    url: str
    verified: bool = False
    data: PartialProfile = Field(default_factory=PartialProfile)

    model_config = ConfigDict(frozen=True)

    def to_ref(self) -> SourceRef:
        return SourceRef(source=self.source.value, url=self.url, verified=self.verified)
