from __future__ import annotations

from typing import Any, Dict, List, Optional

from models import EnrichmentRecord, PartialProfile, SourceKind
from sources.base import Identifier, IdentitySource
from sources.registry import register


# Search hits are kept only when their description reads like a person.
PERSON_HINTS = ("person", "researcher", "scientist", "engineer")


def _claim_ids(claims: Dict[str, Any], prop: str) -> List[str]:
    out: List[str] = []
    for claim in claims.get(prop) or []:
        value = ((claim.get("mainsnak") or {}).get("datavalue") or {}).get("value")
        if isinstance(value, dict) and value.get("id"):
            out.append(value["id"])
    return out


def _claim_time(claims: Dict[str, Any], prop: str) -> Optional[str]:
    for claim in claims.get(prop) or []:
        value = ((claim.get("mainsnak") or {}).get("datavalue") or {}).get("value")
        if isinstance(value, dict) and value.get("time"):
            return value["time"]
    return None


class WikidataSource(IdentitySource):
    source_kind = SourceKind.WIKIDATA

    def _lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        search = self._get_json(
            self.settings.wikidata_api_url,
            params={
                "action": "wbsearchentities",
                "search": identifier.value,
                "format": "json",
                "language": "en",
                "type": "item",
                "limit": 5,
            },
        )
        hits = (search or {}).get("search") or []
        human = next(
            (h for h in hits if any(hint in (h.get("description") or "").lower() for hint in PERSON_HINTS)),
            None,
        )
        if not human or not human.get("id"):
            return None

        q_id = human["id"]
        entity_data = self._get_json(f"{self.settings.wikidata_entity_url}/{q_id}.json")
        entity = ((entity_data or {}).get("entities") or {}).get(q_id)
        if not isinstance(entity, dict):
            return None

        claims = entity.get("claims") or {}
        occupations = _claim_ids(claims, "P106")
        nationalities = _claim_ids(claims, "P27")
        url = f"https://www.wikidata.org/wiki/{q_id}"
        profile = PartialProfile(
            name=((entity.get("labels") or {}).get("en") or {}).get("value"),
            extras={
                "wikidata_id": q_id,
                "description": ((entity.get("descriptions") or {}).get("en") or {}).get("value"),
                "occupation": occupations[0] if occupations else None,
                "date_of_birth": _claim_time(claims, "P569"),
                "nationality": nationalities[0] if nationalities else None,
                "educated_at": _claim_ids(claims, "P69"),
                "awards": _claim_ids(claims, "P166"),
            },
        )
        return EnrichmentRecord(source=self.source_kind, url=url, verified=False, data=profile)


def _register():
    register(WikidataSource.source_kind.value, WikidataSource)


_register()
