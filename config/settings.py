from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    run_env: str
    log_level: str

    # Timeouts/Concurrency
    http_timeout_seconds: float
    lookup_timeout_seconds: float
    enrich_concurrency: int
    user_agent: str

    # Document extraction (OpenAI)
    openai_api_key: str | None
    openai_model: str

    # Optional enrichment credentials (public access when absent)
    github_token: str | None
    gitlab_token: str | None

    # Similarity service used by deduplication
    hf_api_key: str | None
    hf_similarity_url: str

    # Uploads
    upload_max_bytes: int
    allowed_mime_types: tuple[str, ...]

    # Identity source endpoints
    github_api_url: str = "https://api.github.com"
    orcid_api_url: str = "https://pub.orcid.org/v3.0"
    stackexchange_api_url: str = "https://api.stackexchange.com/2.3"
    wikidata_api_url: str = "https://www.wikidata.org/w/api.php"
    wikidata_entity_url: str = "https://www.wikidata.org/wiki/Special:EntityData"
    gitlab_api_url: str = "https://gitlab.com/api/v4"
    devto_api_url: str = "https://dev.to/api"

    # Logging/tracing
    call_trace: bool = False
    call_log_path: str = "logs/external_calls.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    return Settings(
        db_path=os.getenv("DB_PATH", "contacts.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
        lookup_timeout_seconds=float(os.getenv("LOOKUP_TIMEOUT_SECONDS", "30")),
        enrich_concurrency=int(os.getenv("ENRICH_CONCURRENCY", "6")),
        user_agent=os.getenv("USER_AGENT", "Contact-Intelligence-App"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        github_token=os.getenv("GITHUB_TOKEN"),
        gitlab_token=os.getenv("GITLAB_TOKEN"),
        hf_api_key=os.getenv("HF_API_KEY"),
        hf_similarity_url=os.getenv(
            "HF_SIMILARITY_URL",
            "https://api-inference.huggingface.co/models/sentence-transformers/all-MiniLM-L6-v2",
        ),
        upload_max_bytes=int(os.getenv("UPLOAD_MAX_BYTES", str(10 * 1024 * 1024))),
        allowed_mime_types=(
            "application/pdf",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "image/png",
            "image/jpeg",
            "image/jpg",
            "text/plain",
        ),
        github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
        orcid_api_url=os.getenv("ORCID_API_URL", "https://pub.orcid.org/v3.0"),
        stackexchange_api_url=os.getenv("STACKEXCHANGE_API_URL", "https://api.stackexchange.com/2.3"),
        wikidata_api_url=os.getenv("WIKIDATA_API_URL", "https://www.wikidata.org/w/api.php"),
        wikidata_entity_url=os.getenv("WIKIDATA_ENTITY_URL", "https://www.wikidata.org/wiki/Special:EntityData"),
        gitlab_api_url=os.getenv("GITLAB_API_URL", "https://gitlab.com/api/v4"),
        devto_api_url=os.getenv("DEVTO_API_URL", "https://dev.to/api"),
        call_trace=_as_bool(os.getenv("CALL_TRACE", "false")),
        call_log_path=os.getenv("CALL_LOG_PATH", "logs/external_calls.jsonl"),
    )
