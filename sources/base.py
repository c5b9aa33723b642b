from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

import requests

from config.settings import get_settings
from models import EnrichmentRecord, SourceKind
from utils.call_logger import log_call

logger = logging.getLogger(__name__)


LookupStatus = Literal["matched", "no_match", "error"]


@dataclass(frozen=True)
class Identifier:
    """Candidate identifier for one source.

    ``exact`` is True when the value was parsed from a profile URL the person
    supplied, False when it came from a search or a cross-platform guess.
    """

    value: str
    exact: bool = False


@dataclass(frozen=True)
class LookupResult:
    status: LookupStatus
    record: Optional[EnrichmentRecord] = None
    error: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.status == "matched" and self.record is not None


class IdentitySource:
    """Base adapter for an external identity-lookup API.

    Subclasses implement :meth:`_lookup`, returning a record or None for
    "no match" and raising on transport problems. :meth:`fetch` and
    :meth:`lookup` never raise.
    """

    source_kind: SourceKind

    def __init__(self, token: Optional[str] = None) -> None:
        self.token = token
        self.settings = get_settings()

    # --- public API ---
    def fetch(self, identifier: Identifier) -> LookupResult:
        provider = self.source_kind.value
        t0 = time.time()
        try:
            record = self._lookup(identifier)
        except Exception as e:  # noqa: BLE001
            duration_ms = int((time.time() - t0) * 1000)
            logger.warning(
                "Lookup failed for %r",
                identifier.value,
                extra={"step": "lookup", "status": "error", "provider": provider, "error": str(e), "duration_ms": duration_ms},
            )
            log_call(caller="sources.fetch", provider=provider, operation="lookup", duration_ms=duration_ms, status="error", error=str(e))
            return LookupResult(status="error", error=str(e))

        duration_ms = int((time.time() - t0) * 1000)
        status: LookupStatus = "matched" if record is not None else "no_match"
        logger.info(
            "Lookup %s for %r",
            status,
            identifier.value,
            extra={"step": "lookup", "status": status, "provider": provider, "duration_ms": duration_ms},
        )
        log_call(caller="sources.fetch", provider=provider, operation="lookup", duration_ms=duration_ms, status=status)
        return LookupResult(status=status, record=record)

    def lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        return self.fetch(identifier).record

    def _lookup(self, identifier: Identifier) -> Optional[EnrichmentRecord]:
        raise NotImplementedError

    # --- HTTP helpers ---
    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json", "User-Agent": self.settings.user_agent}

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET and decode JSON. Returns None on 404; raises on other non-2xx."""
        resp = requests.get(url, params=params, headers=self._headers(), timeout=self.settings.http_timeout_seconds)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def _get_json_soft(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Secondary GET (repo lists, articles): any failure yields None."""
        try:
            return self._get_json(url, params=params)
        except (requests.RequestException, ValueError) as e:
            logger.debug("Secondary request failed: %s", url, extra={"provider": self.source_kind.value, "error": str(e)})
            return None
