from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from models import EnrichmentRecord, PartialProfile, SourceKind
from sources.base import Identifier, IdentitySource
from sources.registry import register


class GitHubSource(IdentitySource):
    source_kind = SourceKind.GITHUB

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["Accept"] = "application/vnd.github.v3+json"
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def search_by_email(self, email: str) -> Optional[str]:
        """Reverse lookup: login of the first user matching *email*, if any. Raises on HTTP errors."""
        data = self._get_json(f"{self.settings.github_api_url}/search/users", params={"q": email})
        items = (data or {}).get("items") or []
        if not items:
            return None
        return items[0].get("login") or None

    def _lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        username = quote(identifier.value, safe="")
        user = self._get_json(f"{self.settings.github_api_url}/users/{username}")
        if not isinstance(user, dict) or not user.get("login"):
            return None

        repos = self._get_json_soft(
            f"{self.settings.github_api_url}/users/{username}/repos",
            params={"sort": "updated", "per_page": 10},
        )
        repositories = _normalize_repos(repos)
        url = user.get("html_url") or f"https://github.com/{identifier.value}"

        data = PartialProfile(
            name=user.get("name"),
            email=user.get("email"),
            company=user.get("company"),
            location=user.get("location"),
            bio=user.get("bio"),
            website_url=user.get("blog"),
            github_url=url,
            skills=_languages(repositories),
            repositories=repositories,
            extras={
                "username": user.get("login"),
                "followers": user.get("followers"),
                "public_repos": user.get("public_repos"),
            },
        )
        return EnrichmentRecord(source=self.source_kind, url=url, verified=identifier.exact, data=data)


def _normalize_repos(repos: Any) -> List[Dict[str, Any]]:
    if not isinstance(repos, list):
        return []
    out: List[Dict[str, Any]] = []
    for repo in repos:
        if not isinstance(repo, dict):
            continue
        out.append({
            "name": repo.get("name"),
            "description": repo.get("description"),
            "language": repo.get("language"),
            "stars": repo.get("stargazers_count"),
            "url": repo.get("html_url"),
            "topics": repo.get("topics") or [],
        })
    return out


def _languages(repositories: List[Dict[str, Any]]) -> List[str]:
    seen: List[str] = []
    for repo in repositories:
        lang = repo.get("language")
        if lang and lang not in seen:
            seen.append(lang)
    return seen


def _register():
    register(GitHubSource.source_kind.value, GitHubSource)


_register()
