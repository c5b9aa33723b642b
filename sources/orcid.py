from __future__ import annotations

from typing import Any, Dict, List, Optional

from models import EnrichmentRecord, PartialProfile, SourceKind
from sources.base import Identifier, IdentitySource
from sources.registry import register


def _value(node: Any, *path: str) -> Any:
    """Walk nested ORCID dicts; any missing hop yields None."""
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _summaries(activities: Any, group_key: str, summary_key: str) -> List[Dict[str, Any]]:
    groups = _value(activities, group_key, "affiliation-group") or []
    out: List[Dict[str, Any]] = []
    for group in groups:
        summaries = _value(group, "summaries") or []
        if summaries and isinstance(summaries[0], dict):
            summary = summaries[0].get(summary_key)
            if isinstance(summary, dict):
                out.append(summary)
    return out


class OrcidSource(IdentitySource):
    source_kind = SourceKind.ORCID

    def search_by_name(self, name: str) -> Optional[str]:
        """ORCID iD of the first search hit for *name*, if any. Raises on HTTP errors."""
        data = self._get_json(f"{self.settings.orcid_api_url}/search/", params={"q": name})
        results = (data or {}).get("result") or []
        if not results:
            return None
        return _value(results[0], "orcid-identifier", "path") or None

    def _lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        orcid_id = identifier.value
        data = self._get_json(f"{self.settings.orcid_api_url}/{orcid_id}")
        if not isinstance(data, dict):
            return None

        person = data.get("person") or {}
        activities = data.get("activities-summary") or {}

        given = _value(person, "name", "given-names", "value")
        family = _value(person, "name", "family-name", "value")
        name = " ".join(p for p in (given, family) if p) or None

        employments = [
            {
                "organization": _value(emp, "organization", "name"),
                "role": emp.get("role-title"),
                "start_date": _value(emp, "start-date", "year", "value"),
                "end_date": _value(emp, "end-date", "year", "value"),
            }
            for emp in _summaries(activities, "employments", "employment-summary")
        ]
        educations = [
            {
                "institution": _value(edu, "organization", "name"),
                "degree": edu.get("role-title"),
                "year": _value(edu, "end-date", "year", "value"),
            }
            for edu in _summaries(activities, "educations", "education-summary")
        ]

        latest = employments[0] if employments else {}
        url = f"https://orcid.org/{orcid_id}"
        profile = PartialProfile(
            name=name,
            bio=_value(person, "biography", "content"),
            company=latest.get("organization"),
            title=latest.get("role"),
            orcid_url=url,
            education=educations,
            employments=employments,
            extras={"orcid_id": orcid_id},
        )
        return EnrichmentRecord(source=self.source_kind, url=url, verified=identifier.exact, data=profile)


def _register():
    register(OrcidSource.source_kind.value, OrcidSource)


_register()
