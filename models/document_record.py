from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class RunStage(str, Enum):
    QUEUED = "queued"
    EXTRACTING = "extracting"
    ENRICHING = "enriching"
    DEDUPLICATING = "deduplicating"
    SCORING = "scoring"
    COMPLETED = "completed"
    FAILED = "failed"


# Advisory progress checkpoint per stage; FAILED keeps whatever was last written.
STAGE_PROGRESS: dict[RunStage, int] = {
    RunStage.QUEUED: 0,
    RunStage.EXTRACTING: 25,
    RunStage.ENRICHING: 50,
    RunStage.DEDUPLICATING: 75,
    RunStage.SCORING: 90,
    RunStage.COMPLETED: 100,
}

TERMINAL_STAGES = frozenset({RunStage.COMPLETED, RunStage.FAILED})


class DocumentRecord(BaseModel):
    """App/DB record shape: an uploaded document and its pipeline progress."""

    id: str
    user_id: str
    filename: str
    original_name: str
    mime_type: str
    file_size: int
    file_path: str
    status: RunStage = RunStage.QUEUED
    extraction_progress: int = 0
    contact_id: str | None = None
    error_message: str | None = None
    uploaded_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="ignore")
