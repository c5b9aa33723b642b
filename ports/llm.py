from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from models import RawProfile


class LLMClientPort(Protocol):
    def chat(
        self,
        *,
        use_case: str,
        messages: List[Dict[str, Any]],
        temperature: Optional[float] = None,
        prompt_name: Optional[str] = None,
        prompt_text: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> Any:
        ...


class DocumentExtractorPort(Protocol):
    def extract(self, file_bytes: bytes, mime_type: str, api_key: str, filename: str = "document") -> RawProfile:
        ...
