from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Sequence

from models import ContactRecord
from ports.llm import LLMClientPort
from services.llm_client import LLMClient, extract_json, response_text

logger = logging.getLogger(__name__)


SEARCH_PROMPT = """You are an AI assistant that helps filter and rank contacts based on natural language queries.

Given a query like "Find Python developers with machine learning experience" or "Show me contacts from San Francisco",
analyze the list of contacts and return the IDs of contacts that match the query, ranked by relevance.

Query: {query}

Contacts to search:
{contacts}

Return a JSON object of the form {{"ids": ["id1", "id2", "id3"]}} with contact IDs in order of relevance.
If no contacts match, return {{"ids": []}}."""


def _summaries(contacts: Sequence[ContactRecord]) -> str:
    return json.dumps(
        [
            {
                "id": c.id,
                "name": c.name,
                "title": c.title,
                "company": c.company,
                "skills": c.skills,
                "location": c.location,
                "bio": c.bio,
            }
            for c in contacts
        ],
        indent=2,
        ensure_ascii=False,
    )


def _ranked_ids(data: Any) -> List[str]:
    if isinstance(data, dict):
        data = data.get("ids")
    if not isinstance(data, list):
        return []
    return [str(x) for x in data if isinstance(x, (str, int))]


def semantic_search(
    query: str,
    contacts: Sequence[ContactRecord],
    llm: Optional[LLMClientPort] = None,
    api_key: Optional[str] = None,
) -> List[ContactRecord]:
    """Rank *contacts* against a natural-language *query*.

    Falls back to the full list when the model fails or matches nothing.
    """
    if not contacts:
        return []
    prompt = SEARCH_PROMPT.format(query=query, contacts=_summaries(contacts))
    llm = llm or LLMClient()
    try:
        resp = llm.chat(
            use_case="contact_search",
            messages=[{"role": "user", "content": prompt}],
            prompt_name="contact_search",
            prompt_text=prompt,
            api_key=api_key,
        )
    except Exception as e:  # noqa: BLE001
        logger.warning("Semantic search failed; returning all contacts", extra={"step": "search", "status": "error", "provider": "openai", "error": str(e)})
        return list(contacts)

    by_id = {c.id: c for c in contacts}
    ids = dict.fromkeys(_ranked_ids(extract_json(response_text(resp))))
    ordered = [by_id[i] for i in ids if i in by_id]
    return ordered or list(contacts)
