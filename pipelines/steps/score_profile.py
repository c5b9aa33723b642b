from __future__ import annotations

from models import RunStage
from pipelines.runner import RunContext
from services.scoring import score


class ScoreProfile:
    stage = RunStage.SCORING

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.enriched is None:
            raise ValueError("ScoreProfile requires an enriched profile")
        value = score(ctx.records, ctx.enriched)
        ctx.enriched = ctx.enriched.model_copy(update={"confidence_score": value})
        ctx.meta["confidence_score"] = value
        return ctx
