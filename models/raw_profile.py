from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from .profile_fields import ContactFields


class RawProfile(ContactFields):
    """LLM structured output: fields extracted from a single uploaded document."""

    experience: list[Any] = Field(default_factory=list)
    profile_urls: list[str] = Field(default_factory=list, alias="profileUrls")

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @field_validator("experience", "profile_urls", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, dict)):
            return [value]
        return value

    def is_empty(self) -> bool:
        return not any(v for v in self.model_dump().values())
