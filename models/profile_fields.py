from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Contact scalar fields, in the order used by mapping and storage.
SCALAR_FIELDS: tuple[str, ...] = (
    "name",
    "email",
    "phone",
    "company",
    "title",
    "location",
    "bio",
    "linkedin_url",
    "github_url",
    "orcid_url",
    "website_url",
    "twitter_url",
)

# Multi-valued fields that are unioned across sources.
UNION_FIELDS: tuple[str, ...] = ("skills", "education")

# Per-source structured arrays, attached verbatim under their own key.
NESTED_FIELDS: tuple[str, ...] = (
    "repositories",
    "projects",
    "articles",
    "publications",
    "employments",
)


class ContactFields(BaseModel):
    """Fields shared by raw, partial and enriched profiles.

    Accepts the camelCase keys produced by the document extractor
    (``githubUrl``) as well as snake_case names.
    """

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    title: str | None = None
    location: str | None = None
    bio: str | None = None
    linkedin_url: str | None = Field(default=None, alias="linkedinUrl")
    github_url: str | None = Field(default=None, alias="githubUrl")
    orcid_url: str | None = Field(default=None, alias="orcidUrl")
    website_url: str | None = Field(default=None, alias="websiteUrl")
    twitter_url: str | None = Field(default=None, alias="twitterUrl")
    skills: list[str] = Field(default_factory=list)
    education: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("skills", "education", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, dict)):
            return [value]
        return value

    @field_validator(*SCALAR_FIELDS, mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        if value is not None and not isinstance(value, str):
            return str(value)
        return value
