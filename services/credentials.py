from __future__ import annotations

import logging
from typing import Dict, Optional

from config.settings import Settings, get_settings
from db.repos.api_keys_repo import ApiKeysRepo

logger = logging.getLogger(__name__)


class MissingCredentialError(RuntimeError):
    """A required third-party credential is not configured for the user."""

    def __init__(self, service: str, key_name: str = "api_key") -> None:
        super().__init__(f"Missing credential: {service}/{key_name}")
        self.service = service
        self.key_name = key_name


# (service, key_name) -> Settings attribute used when the user has no stored key
_ENV_FALLBACKS: Dict[tuple[str, str], str] = {
    ("openai", "api_key"): "openai_api_key",
    ("github", "api_key"): "github_token",
    ("gitlab", "api_key"): "gitlab_token",
    ("huggingface", "api_key"): "hf_api_key",
}


class CredentialStore:
    """Per-user credential lookup: stored api_keys row first, then environment."""

    def __init__(self, repo: Optional[ApiKeysRepo] = None, settings: Optional[Settings] = None) -> None:
        self.repo = repo
        self.settings = settings or get_settings()

    def get_credential(self, user_id: str, service: str, key_name: str = "api_key") -> Optional[str]:
        if self.repo is not None:
            value = self.repo.get_credential(user_id, service, key_name)
            if value:
                return value
        attr = _ENV_FALLBACKS.get((service, key_name))
        value = getattr(self.settings, attr, None) if attr else None
        if not value:
            logger.debug("No %s/%s credential for user %s", service, key_name, user_id, extra={"step": "credentials", "status": "missing"})
        return value or None

    def require(self, user_id: str, service: str, key_name: str = "api_key") -> str:
        value = self.get_credential(user_id, service, key_name)
        if not value:
            raise MissingCredentialError(service, key_name)
        return value
