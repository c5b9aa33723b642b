from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from .enrichment_record import SourceRef
from .profile_fields import ContactFields


class EnrichedProfile(ContactFields):
    """Canonical merged profile: raw extraction plus every enrichment source."""

    experience: list[Any] = Field(default_factory=list)
    profile_urls: list[str] = Field(default_factory=list, alias="profileUrls")
    repositories: list[dict[str, Any]] | None = None
    projects: list[dict[str, Any]] | None = None
    articles: list[dict[str, Any]] | None = None
    publications: list[dict[str, Any]] | None = None
    employments: list[dict[str, Any]] | None = None
    sources: list[SourceRef] = Field(default_factory=list)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
