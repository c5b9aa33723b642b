from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config.settings import get_settings
from models import RawProfile
from ports.llm import LLMClientPort
from services.llm_client import LLMClient, extract_json, response_text

logger = logging.getLogger(__name__)


class ExtractionError(RuntimeError):
    """The document could not be turned into a usable RawProfile."""


class UnsupportedDocumentError(ExtractionError):
    pass


EXTRACTION_PROMPT = """You are an expert at extracting structured contact information from documents.
Analyze the provided document (resume, business card, or other professional document) and extract all relevant contact information.

Extract the following fields when available:
- name: Full name of the person
- email: Email address
- phone: Phone number
- company: Current company/organization
- title: Job title/position
- location: City, state, or country
- skills: Array of technical or professional skills
- linkedinUrl: LinkedIn profile URL
- githubUrl: GitHub profile URL
- orcidUrl: ORCID iD URL
- websiteUrl: Personal website or portfolio URL
- twitterUrl: Twitter/X profile URL
- profileUrls: Array of any other profile URLs found
- bio: Brief professional summary
- education: Array of educational qualifications
- experience: Array of work experience objects with company, title, and duration

Return ONLY a valid JSON object with the extracted data. If a field is not found, omit it from the response.
Be as accurate as possible. Extract all available information."""


def validate_upload(mime_type: str, size: int) -> None:
    """Raise :class:`UnsupportedDocumentError` for disallowed types or oversized files."""
    settings = get_settings()
    if mime_type not in settings.allowed_mime_types:
        raise UnsupportedDocumentError(f"Unsupported file type: {mime_type}")
    if size <= 0:
        raise UnsupportedDocumentError("Empty file")
    if size > settings.upload_max_bytes:
        raise UnsupportedDocumentError(f"File too large: {size} bytes (max {settings.upload_max_bytes})")


def _document_part(file_bytes: bytes, mime_type: str, filename: str) -> Dict[str, Any]:
    if mime_type == "text/plain":
        return {"type": "text", "text": file_bytes.decode("utf-8", errors="replace")}
    data_url = f"data:{mime_type};base64,{base64.b64encode(file_bytes).decode('ascii')}"
    if mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": data_url}}
    return {"type": "file", "file": {"filename": filename, "file_data": data_url}}


class DocumentExtractor:
    """AI-backed contact extraction for one uploaded document."""

    def __init__(self, llm: Optional[LLMClientPort] = None) -> None:
        self.llm = llm or LLMClient()

    def extract(self, file_bytes: bytes, mime_type: str, api_key: str, filename: str = "document") -> RawProfile:
        validate_upload(mime_type, len(file_bytes))
        messages: List[Dict[str, Any]] = [
            {
                "role": "user",
                "content": [
                    _document_part(file_bytes, mime_type, filename),
                    {"type": "text", "text": EXTRACTION_PROMPT},
                ],
            }
        ]
        try:
            resp = self.llm.chat(
                use_case="document_extraction",
                messages=messages,
                prompt_name="document_extraction",
                prompt_text=EXTRACTION_PROMPT,
                api_key=api_key,
            )
        except Exception as e:
            raise ExtractionError(f"Failed to extract contact data: {e}") from e

        text = response_text(resp)
        if not text:
            raise ExtractionError("Empty response from extraction model")
        data = extract_json(text)
        if not isinstance(data, dict):
            raise ExtractionError("Extraction model returned no JSON object")

        try:
            profile = RawProfile.model_validate(data)
        except ValidationError as e:
            raise ExtractionError(f"Extracted data did not validate: {e}") from e
        if profile.is_empty():
            raise ExtractionError("No contact fields found in document")

        logger.info(
            "Extracted %d fields from %s",
            sum(1 for v in profile.model_dump().values() if v),
            filename,
            extra={"step": "extract", "status": "ok", "provider": "openai"},
        )
        return profile
