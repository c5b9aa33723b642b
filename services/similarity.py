from __future__ import annotations

from typing import Optional

import requests

from config.settings import get_settings
from utils.call_logger import traced_call


class HuggingFaceSimilarity:
    """Sentence-similarity via the HuggingFace inference API.

    Raises on transport/HTTP errors; the deduplication engine maps those to 0.
    """

    def __init__(self, api_key: str, url: Optional[str] = None) -> None:
        settings = get_settings()
        self.api_key = api_key
        self.url = url or settings.hf_similarity_url
        self.timeout = settings.http_timeout_seconds

    def similarity(self, text_a: str, text_b: str) -> float:
        with traced_call(caller="similarity", provider="huggingface", operation="sentence_similarity"):
            resp = requests.post(
                self.url,
                headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
                json={"inputs": {"source_sentence": text_a, "sentences": [text_b]}},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            result = resp.json()
        if isinstance(result, list) and result:
            return max(0.0, min(float(result[0]), 1.0))
        return 0.0
