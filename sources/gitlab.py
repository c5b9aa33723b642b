from __future__ import annotations

from typing import Any, Dict, List, Optional

from models import EnrichmentRecord, PartialProfile, SourceKind
from sources.base import Identifier, IdentitySource
from sources.registry import register


class GitLabSource(IdentitySource):
    source_kind = SourceKind.GITLAB

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.token:
            headers["PRIVATE-TOKEN"] = self.token
        return headers

    def _lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        users = self._get_json(f"{self.settings.gitlab_api_url}/users", params={"username": identifier.value})
        if not isinstance(users, list) or not users:
            return None
        user = users[0]
        url = user.get("web_url")
        if not url:
            return None

        projects = self._get_json_soft(
            f"{self.settings.gitlab_api_url}/users/{user.get('id')}/projects",
            params={"per_page": 10, "order_by": "updated_at"},
        )
        # Username reused from another platform: same handle, not necessarily same person
        profile = PartialProfile(
            name=user.get("name"),
            email=user.get("public_email"),
            bio=user.get("bio"),
            location=user.get("location"),
            website_url=user.get("website_url"),
            projects=_normalize_projects(projects),
            extras={"username": user.get("username")},
        )
        return EnrichmentRecord(source=self.source_kind, url=url, verified=False, data=profile)


def _normalize_projects(projects: Any) -> List[Dict[str, Any]]:
    if not isinstance(projects, list):
        return []
    return [
        {
            "name": p.get("name"),
            "description": p.get("description"),
            "url": p.get("web_url"),
            "stars": p.get("star_count"),
            "forks": p.get("forks_count"),
        }
        for p in projects
        if isinstance(p, dict)
    ]


def _register():
    register(GitLabSource.source_kind.value, GitLabSource)


_register()
