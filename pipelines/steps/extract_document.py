from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from models import RunStage
from pipelines.runner import RunContext
from ports.llm import DocumentExtractorPort
from ports.repos import CredentialStorePort
from services.credentials import MissingCredentialError
from services.document_extractor import ExtractionError

logger = logging.getLogger(__name__)


class ExtractDocument:
    """Read the uploaded file and turn it into a RawProfile via the AI extractor."""

    stage = RunStage.EXTRACTING

    def __init__(self, extractor: DocumentExtractorPort, credentials: CredentialStorePort, file_bytes: Optional[bytes] = None) -> None:
        self.extractor = extractor
        self.credentials = credentials
        self.file_bytes = file_bytes

    def run(self, ctx: RunContext) -> RunContext:
        doc = ctx.document
        if doc is None:
            raise ExtractionError("No document to extract")
        api_key = self.credentials.get_credential(ctx.user_id, "openai", "api_key")
        if not api_key:
            raise MissingCredentialError("openai", "api_key")

        try:
            data = self.file_bytes if self.file_bytes is not None else Path(doc.file_path).read_bytes()
        except OSError as e:
            raise ExtractionError(f"Cannot read {doc.file_path}: {e}") from e

        raw = self.extractor.extract(data, doc.mime_type, api_key, filename=doc.original_name)
        if raw is None or raw.is_empty():
            raise ExtractionError("Extractor returned no contact fields")
        ctx.raw = raw
        ctx.meta["extracted_fields"] = sum(1 for v in raw.model_dump().values() if v)
        logger.info("Extracted %s", raw.name or "<unnamed>", extra={"step": "extract", "status": "ok"})
        return ctx
