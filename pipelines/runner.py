from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from models import ContactRecord, DocumentRecord, EnrichedProfile, EnrichmentRecord, RawProfile, RunStage, SourceKind
from services.dedupe import DedupeResult
from sources.base import Identifier
from utils.logging_setup import init_logging


@dataclass
class RunContext:
    user_id: str
    document: Optional[DocumentRecord] = None
    raw: Optional[RawProfile] = None
    identifiers: Dict[SourceKind, Identifier] = field(default_factory=dict)
    records: Tuple[EnrichmentRecord, ...] = ()
    enriched: Optional[EnrichedProfile] = None
    dedupe: Optional[DedupeResult] = None
    contact: Optional[ContactRecord] = None
    # Set by a step to end the run early (e.g. duplicate merged into an existing contact)
    done: bool = False
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    stage: RunStage

    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step], on_stage: Optional[Callable[[RunStage, RunContext], None]] = None):
        self.steps = steps
        self.on_stage = on_stage

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        current: Optional[RunStage] = None
        for step in self.steps:
            if ctx.done:
                break
            stage = getattr(step, "stage", None)
            if stage is not None and stage != current and self.on_stage:
                self.on_stage(stage, ctx)
            current = stage or current
            ctx = step.run(ctx)
        return ctx
