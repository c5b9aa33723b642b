from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional


def call_usage_for_run(run_id: str) -> Dict[str, Dict[str, int]]:
    """Aggregate traced external calls for the given run_id.

    Returns dict like { 'github': {'calls': N, 'errors': E, 'tokens': T}, 'openai': {...} }
    """
    result: Dict[str, Dict[str, int]] = {}
    from config.settings import get_settings
    log_path = Path(get_settings().call_log_path)
    if not log_path.exists():
        return result
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            try:
                rec = json.loads(line)
            except ValueError:
                continue
            if not isinstance(rec, dict) or rec.get("run_id") != run_id:
                continue
            provider = rec.get("provider") or "unknown"
            bucket = result.setdefault(provider, {"calls": 0, "errors": 0, "tokens": 0})
            bucket["calls"] += 1
            if rec.get("status") == "error":
                bucket["errors"] += 1
            usage = rec.get("usage") or {}
            try:
                bucket["tokens"] += int(usage.get("total_tokens") or 0)
            except (TypeError, ValueError):
                pass
    return result


def print_summary(document_id: str, meta: Dict[str, Any], contact: Optional[Any] = None) -> None:
    """Print summary of one document run."""
    print("\n" + "=" * 60)
    print("CONTACT INTEL - DOCUMENT RUN")
    print("=" * 60)
    print(f"Document: {document_id}")
    print(f"Status: {meta.get('status', 'N/A')}")
    if meta.get("error"):
        print(f"Error: {meta['error']}")
    print(f"Identifiers Resolved: {meta.get('identifiers_resolved', 0)}")
    print(f"Sources Matched: {meta.get('sources_matched', 0)}")
    print(f"Duplicate Check: {meta.get('dedupe', 'N/A')}")
    if contact is not None:
        print(f"Contact: {contact.id} ({meta.get('contact_action', 'N/A')})")
        print(f"  Name: {contact.name}")
        print(f"  Confidence: {contact.confidence_score:.2f}")
        print(f"  Sources: {', '.join(s.source for s in contact.sources) or '-'}")
    # External call summary for current RUN_ID if tracing enabled
    from config.settings import get_settings
    run_id = os.getenv("RUN_ID")
    if run_id and get_settings().call_trace:
        usage = call_usage_for_run(run_id)
        if usage:
            print("External Calls:")
            for provider, stats in sorted(usage.items()):
                print(f"  {provider}: calls={stats['calls']}, errors={stats['errors']}, tokens={stats['tokens']}")
    print("=" * 60)
