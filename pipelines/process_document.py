"""Run one uploaded document through extraction, enrichment, dedupe and scoring.

Stage and progress are written to the document row as the run advances:

    queued(0) -> extracting(25) -> enriching(50) -> deduplicating(75)
              -> scoring(90) -> completed(100)

Any stage may end in ``failed`` instead. Both terminal states are final; a
failed document must be re-submitted as a new run. A duplicate match ends the
run as ``completed`` after updating the existing contact.
"""
from __future__ import annotations

import logging
import sqlite3
import time
from typing import Callable, Optional

from db.repos.api_keys_repo import ApiKeysRepo
from db.repos.contacts_repo import ContactsRepo
from db.repos.documents_repo import DocumentsRepo
from models import STAGE_PROGRESS, TERMINAL_STAGES, RunStage
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import (
    DeduplicateProfile,
    EnrichProfile,
    ExtractDocument,
    MergeProfile,
    PersistContact,
    ScoreProfile,
)
from pipelines.steps.enrich_profile import SourceFactory
from ports.llm import DocumentExtractorPort
from ports.repos import ContactsRepoPort, CredentialStorePort, DocumentsRepoPort
from ports.similarity import SimilarityPort
from services.credentials import CredentialStore
from services.document_extractor import DocumentExtractor

logger = logging.getLogger(__name__)


# Shown to the user; the specific cause only goes to the log
FAILURE_MESSAGE = "Processing failed. Please try uploading the document again."


class DocumentProcessor:
    def __init__(
        self,
        documents: DocumentsRepoPort,
        contacts: ContactsRepoPort,
        credentials: CredentialStorePort,
        extractor: Optional[DocumentExtractorPort] = None,
        source_factory: Optional[SourceFactory] = None,
        similarity_factory: Optional[Callable[[str], SimilarityPort]] = None,
        resolver: Optional[Callable] = None,
    ) -> None:
        self.documents = documents
        self.contacts = contacts
        self.credentials = credentials
        self.extractor = extractor or DocumentExtractor()
        self.source_factory = source_factory
        self.similarity_factory = similarity_factory
        self.resolver = resolver

    def _pipeline(self, on_stage: Callable[[RunStage, RunContext], None]) -> Pipeline:
        return Pipeline(
            [
                ExtractDocument(self.extractor, self.credentials),
                EnrichProfile(self.credentials, source_factory=self.source_factory, resolver=self.resolver),
                MergeProfile(),
                DeduplicateProfile(self.contacts, self.credentials, similarity_factory=self.similarity_factory),
                ScoreProfile(),
                PersistContact(self.contacts),
            ],
            on_stage=on_stage,
        )

    def process(self, document_id: str, user_id: str) -> Optional[RunContext]:
        """Run the pipeline for one document. Returns None if the document is unknown or already finished."""
        doc = self.documents.get_document(document_id, user_id)
        if doc is None:
            logger.warning("Document %s not found", document_id, extra={"step": "process", "document_id": document_id, "status": "missing"})
            return None
        if doc.status in TERMINAL_STAGES:
            logger.info("Document %s already %s", document_id, doc.status.value, extra={"step": "process", "document_id": document_id, "status": "skipped"})
            return None

        progress = {"value": doc.extraction_progress}

        def _advance(stage: RunStage, ctx: Optional[RunContext] = None, **fields) -> None:
            # Stages only move forward
            value = max(progress["value"], STAGE_PROGRESS.get(stage, progress["value"]))
            progress["value"] = value
            self.documents.update_document(document_id, user_id, {"status": stage, "extraction_progress": value, **fields})
            logger.info("Document %s -> %s (%d%%)", document_id, stage.value, value, extra={"step": "process", "document_id": document_id, "status": stage.value})

        ctx = RunContext(user_id=user_id, document=doc)
        t0 = time.time()
        try:
            ctx = self._pipeline(_advance).run(ctx)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "Processing failed for document %s",
                document_id,
                exc_info=True,
                extra={"step": "process", "document_id": document_id, "status": "failed", "error": str(e), "duration_ms": int((time.time() - t0) * 1000)},
            )
            self.documents.update_document(
                document_id,
                user_id,
                {"status": RunStage.FAILED, "error_message": FAILURE_MESSAGE},
            )
            ctx.meta["error"] = str(e)
            ctx.meta["status"] = RunStage.FAILED.value
            return ctx

        contact_id = ctx.contact.id if ctx.contact is not None else None
        _advance(RunStage.COMPLETED, contact_id=contact_id)
        ctx.meta["status"] = RunStage.COMPLETED.value
        ctx.meta["duration_ms"] = int((time.time() - t0) * 1000)
        return ctx


def process_document(conn: sqlite3.Connection, document_id: str, user_id: str, **kwargs) -> Optional[RunContext]:
    """Convenience entry point wiring the sqlite repositories."""
    processor = DocumentProcessor(
        documents=DocumentsRepo(conn),
        contacts=ContactsRepo(conn),
        credentials=CredentialStore(ApiKeysRepo(conn)),
        **kwargs,
    )
    return processor.process(document_id, user_id)
