from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enrichment_record import SourceRef


# Stored when nothing in the document or any source yields a name
UNKNOWN_NAME = "Unknown"


class ContactRecord(BaseModel):
    """App/DB record shape: a contact owned by exactly one user."""

    id: str
    user_id: str
    name: str
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    title: str | None = None
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    linkedin_url: str | None = None
    github_url: str | None = None
    orcid_url: str | None = None
    twitter_url: str | None = None
    website_url: str | None = None
    bio: str | None = None
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    sources: list[SourceRef] = Field(default_factory=list)
    extracted_data: dict[str, Any] | None = None
    enriched_data: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="ignore")
