from __future__ import annotations

import concurrent.futures as _fut
import logging
import time
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from config.settings import get_settings
from models import SCALAR_FIELDS, UNION_FIELDS, EnrichmentRecord, PartialProfile, RawProfile, RunStage, SourceKind
from pipelines.runner import RunContext
from ports.repos import CredentialStorePort
from ports.source import IdentitySourcePort
from services.identifiers import resolve_identifiers
from services.merge import merge, order_records
from sources.base import Identifier
from sources.registry import get_source  # package import registers the adapters

logger = logging.getLogger(__name__)


SourceFactory = Callable[[SourceKind, Optional[str]], IdentitySourcePort]

# Sources that accept an optional per-user token
_TOKEN_SERVICES = {SourceKind.GITHUB: "github", SourceKind.GITLAB: "gitlab"}

DOCUMENT_URL = "uploaded_document"

# How often to check for a lookup that has not been picked up by a worker yet
_POLL_SECONDS = 0.05


def _registry_factory(kind: SourceKind, token: Optional[str]) -> IdentitySourcePort:
    return get_source(kind.value, token=token)


def document_record(raw: RawProfile) -> EnrichmentRecord:
    data = PartialProfile.model_validate(raw.model_dump(include=set(SCALAR_FIELDS) | set(UNION_FIELDS)))
    return EnrichmentRecord(source=SourceKind.DOCUMENT, url=DOCUMENT_URL, verified=False, data=data)


class EnrichProfile:
    """Resolve identifiers and query every resolvable source in parallel.

    Each lookup runs on the pool with its own HTTP timeout and is abandoned
    ``lookup_timeout_seconds`` after a worker starts it. A source that misses
    its timeout contributes nothing. Records are stored document-first, then
    in merge precedence, independent of completion order.
    """

    stage = RunStage.ENRICHING

    def __init__(
        self,
        credentials: CredentialStorePort,
        source_factory: Optional[SourceFactory] = None,
        resolver: Optional[Callable[..., Mapping[SourceKind, Identifier]]] = None,
        max_workers: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.credentials = credentials
        self.source_factory = source_factory or _registry_factory
        self.resolver = resolver or resolve_identifiers
        self.max_workers = max(1, max_workers or settings.enrich_concurrency)
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.lookup_timeout_seconds

    def _tokens(self, user_id: str) -> Dict[SourceKind, Optional[str]]:
        return {kind: self.credentials.get_credential(user_id, service, "api_key") for kind, service in _TOKEN_SERVICES.items()}

    def _collect(self, futures: Dict[_fut.Future, SourceKind], started: Dict[SourceKind, float]) -> List[EnrichmentRecord]:
        """Gather results, abandoning each lookup ``timeout_seconds`` after it started.

        Queued lookups are not charged for time spent waiting on a worker.
        """
        collected: List[EnrichmentRecord] = []
        pending = set(futures)
        while pending:
            expiries = [started[futures[f]] + self.timeout_seconds for f in pending if futures[f] in started]
            wait_for = max(0.0, min(expiries) - time.monotonic()) if expiries else _POLL_SECONDS
            done, pending = _fut.wait(pending, timeout=wait_for, return_when=_fut.FIRST_COMPLETED)

            for fut in done:
                kind = futures[fut]
                try:
                    record = fut.result()
                except Exception as e:  # noqa: BLE001
                    logger.warning("Lookup raised", extra={"step": "enrich", "status": "error", "provider": kind.value, "error": str(e)})
                    continue
                if record is not None:
                    collected.append(record)

            now = time.monotonic()
            expired = {
                f for f in pending
                if not f.done() and futures[f] in started and now - started[futures[f]] >= self.timeout_seconds
            }
            for fut in expired:
                fut.cancel()
                logger.warning("Lookup timed out", extra={"step": "enrich", "status": "timeout", "provider": futures[fut].value})
            pending -= expired
        return collected

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.raw is None:
            raise ValueError("EnrichProfile requires an extracted profile")
        tokens = self._tokens(ctx.user_id)
        identifiers = dict(self.resolver(ctx.raw, tokens.get(SourceKind.GITHUB)))
        ctx.identifiers = identifiers

        collected: List[EnrichmentRecord] = []
        if identifiers:
            pool = _fut.ThreadPoolExecutor(max_workers=min(self.max_workers, len(identifiers)))
            started: Dict[SourceKind, float] = {}

            def _timed_lookup(kind: SourceKind, source: IdentitySourcePort, ident: Identifier) -> Optional[EnrichmentRecord]:
                # The timeout clock starts when a worker picks the lookup up, not at submission
                started[kind] = time.monotonic()
                return source.lookup(ident)

            try:
                futures: Dict[_fut.Future, SourceKind] = {}
                for kind, ident in identifiers.items():
                    try:
                        source = self.source_factory(kind, tokens.get(kind))
                    except KeyError as e:
                        logger.warning("No adapter for source", extra={"step": "enrich", "provider": kind.value, "error": str(e)})
                        continue
                    futures[pool.submit(_timed_lookup, kind, source, ident)] = kind
                collected = self._collect(futures, started)
            finally:
                # Do not wait for abandoned lookups; their HTTP timeout ends them
                pool.shutdown(wait=False, cancel_futures=True)

        ordered: Tuple[EnrichmentRecord, ...] = (document_record(ctx.raw), *order_records(collected))
        ctx.records = ordered
        ctx.meta["identifiers_resolved"] = len(identifiers)
        ctx.meta["sources_matched"] = len(ordered) - 1
        logger.info(
            "Enrichment matched %d of %d sources",
            len(ordered) - 1,
            len(identifiers),
            extra={"step": "enrich", "status": "ok"},
        )
        return ctx


class MergeProfile:
    """Combine the raw profile and collected records into the enriched profile."""

    stage = RunStage.ENRICHING

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.raw is None:
            raise ValueError("MergeProfile requires an extracted profile")
        enriched = merge(ctx.raw, ctx.records)
        ctx.enriched = enriched.model_copy(update={"sources": [r.to_ref() for r in ctx.records]})
        return ctx
