from __future__ import annotations

import logging

from models import RunStage
from pipelines.runner import RunContext
from ports.repos import ContactsRepoPort
from services.mapping import to_contact_fields

logger = logging.getLogger(__name__)


class PersistContact:
    # Persisting is the tail of the scoring stage; completion is set by the orchestrator
    stage = RunStage.SCORING

    def __init__(self, contacts: ContactsRepoPort) -> None:
        self.contacts = contacts

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.enriched is None:
            raise ValueError("PersistContact requires an enriched profile")
        ctx.contact = self.contacts.create_contact(ctx.user_id, to_contact_fields(ctx.enriched, ctx.raw))
        ctx.meta["contact_action"] = "created"
        logger.info("Created contact %s", ctx.contact.id, extra={"step": "persist", "status": "ok"})
        return ctx
