from __future__ import annotations

import logging
from typing import Callable, Optional

from models import RunStage
from pipelines.runner import RunContext
from ports.repos import ContactsRepoPort, CredentialStorePort
from ports.similarity import SimilarityPort
from services.dedupe import DedupeResult, dedupe, merge_into_existing
from services.scoring import score
from services.similarity import HuggingFaceSimilarity

logger = logging.getLogger(__name__)


class DeduplicateProfile:
    """Compare the enriched profile with the user's contacts.

    Without a similarity credential the check is skipped and the profile is
    treated as new. On a match the existing contact is updated in place and
    the run ends without creating a contact.
    """

    stage = RunStage.DEDUPLICATING

    def __init__(
        self,
        contacts: ContactsRepoPort,
        credentials: CredentialStorePort,
        similarity_factory: Optional[Callable[[str], SimilarityPort]] = None,
    ) -> None:
        self.contacts = contacts
        self.credentials = credentials
        self.similarity_factory = similarity_factory or (lambda key: HuggingFaceSimilarity(key))

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.enriched is None:
            raise ValueError("DeduplicateProfile requires an enriched profile")
        hf_key = self.credentials.get_credential(ctx.user_id, "huggingface", "api_key")
        if not hf_key:
            logger.info("No similarity credential; skipping duplicate check", extra={"step": "dedupe", "status": "skipped"})
            ctx.dedupe = DedupeResult(is_duplicate=False)
            ctx.meta["dedupe"] = "skipped"
            return ctx

        existing = self.contacts.list_contacts(ctx.user_id)
        result = dedupe(ctx.enriched, existing, self.similarity_factory(hf_key))
        ctx.dedupe = result
        ctx.meta["dedupe"] = "duplicate" if result.is_duplicate else "unique"
        if not result.is_duplicate or not result.matched_id:
            return ctx

        match = next((c for c in existing if c.id == result.matched_id), None)
        if match is None:
            match = self.contacts.get_contact(result.matched_id, ctx.user_id)
        if match is None:
            # Matched contact vanished between scan and update; fall through to create
            logger.warning("Matched contact %s no longer exists", result.matched_id, extra={"step": "dedupe", "status": "missing"})
            ctx.dedupe = DedupeResult(is_duplicate=False)
            return ctx

        scored = ctx.enriched.model_copy(update={"confidence_score": score(ctx.records, ctx.enriched)})
        ctx.enriched = scored
        ctx.contact = self.contacts.update_contact(match.id, ctx.user_id, merge_into_existing(match, scored))
        ctx.meta["contact_action"] = "merged"
        ctx.done = True
        logger.info("Merged into existing contact %s", match.id, extra={"step": "dedupe", "status": "merged"})
        return ctx
