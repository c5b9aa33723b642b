from __future__ import annotations

import os


# Central routing for LLM use-cases. Edit here to change per-operation defaults.
# Per-route models can be overridden via env vars for quick testing.
#
# Keys are use_case identifiers consumed by services/llm_client.py
ROUTES: dict[str, dict] = {
    # Contact extraction from an uploaded document (multimodal, JSON output)
    "document_extraction": {
        "provider": os.getenv("LLM_EXTRACTION_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_EXTRACTION"),  # falls back to global OPENAI_MODEL
        "temperature": 0,
        "json_output": True,
        # Logical operation name for logging (not a vendor API name)
        "operation": "document_extraction",
    },
    # Natural-language ranking over a user's contacts
    "contact_search": {
        "provider": os.getenv("LLM_SEARCH_PROVIDER", "openai"),
        "model": os.getenv("OPENAI_MODEL_SEARCH"),
        "json_output": True,
        "operation": "contact_search",
    },
}
