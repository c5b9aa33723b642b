from __future__ import annotations

from typing import Any, Dict, List, Optional

from models import EnrichmentRecord, PartialProfile, SourceKind
from sources.base import Identifier, IdentitySource
from sources.registry import register


class DevToSource(IdentitySource):
    source_kind = SourceKind.DEVTO

    def _lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        username = identifier.value
        user = self._get_json(f"{self.settings.devto_api_url}/users/by_username", params={"url": username})
        if not isinstance(user, dict) or not user.get("username"):
            return None

        articles = self._get_json_soft(
            f"{self.settings.devto_api_url}/articles",
            params={"username": username, "per_page": 10},
        )
        twitter = user.get("twitter_username")
        profile = PartialProfile(
            name=user.get("name"),
            bio=user.get("summary"),
            location=user.get("location"),
            website_url=user.get("website_url"),
            twitter_url=f"https://twitter.com/{twitter}" if twitter else None,
            articles=_normalize_articles(articles),
            extras={
                "username": user.get("username"),
                "github_username": user.get("github_username"),
                "profile_image": user.get("profile_image"),
            },
        )
        return EnrichmentRecord(
            source=self.source_kind,
            url=f"https://dev.to/{user.get('username')}",
            verified=False,
            data=profile,
        )


def _normalize_articles(articles: Any) -> List[Dict[str, Any]]:
    if not isinstance(articles, list):
        return []
    return [
        {
            "title": a.get("title"),
            "description": a.get("description"),
            "url": a.get("url"),
            "published_at": a.get("published_at"),
            "tags": a.get("tag_list") or [],
        }
        for a in articles
        if isinstance(a, dict)
    ]


def _register():
    register(DevToSource.source_kind.value, DevToSource)


_register()
