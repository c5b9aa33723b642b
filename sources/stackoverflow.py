from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup

from models import EnrichmentRecord, PartialProfile, SourceKind
from sources.base import Identifier, IdentitySource
from sources.registry import register


def _strip_html(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    plain = " ".join(BeautifulSoup(text, "html.parser").get_text(" ").split())
    return plain or None


class StackOverflowSource(IdentitySource):
    source_kind = SourceKind.STACKOVERFLOW

    def _lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        data = self._get_json(
            f"{self.settings.stackexchange_api_url}/users",
            params={"inname": identifier.value, "site": "stackoverflow", "filter": "!9Z(-wwYGT"},
        )
        items = (data or {}).get("items") or []
        if not items:
            return None

        # Best-effort name search: first hit, never authoritative
        user = items[0]
        url = user.get("link")
        if not url:
            return None
        badges = user.get("badge_counts") or {}
        profile = PartialProfile(
            name=user.get("display_name"),
            location=user.get("location"),
            bio=_strip_html(user.get("about_me")),
            website_url=user.get("website_url"),
            extras={
                "reputation": user.get("reputation"),
                "badges": {
                    "gold": badges.get("gold", 0),
                    "silver": badges.get("silver", 0),
                    "bronze": badges.get("bronze", 0),
                },
                "profile_image": user.get("profile_image"),
            },
        )
        return EnrichmentRecord(source=self.source_kind, url=url, verified=False, data=profile)


def _register():
    register(StackOverflowSource.source_kind.value, StackOverflowSource)


_register()
