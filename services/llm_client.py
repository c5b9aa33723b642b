from __future__ import annotations

import json
import re
import time
from typing import Any, Dict, List, Optional

from config.llm_routes import ROUTES
from config.settings import get_settings
from utils.call_logger import log_call, sha256_text


def extract_json(text: Optional[str]) -> Any:
    """Lenient JSON parse of model output: raw, then fenced block, then outermost brackets."""
    if not text:
        return None
    # Try raw parse first
    try:
        return json.loads(text)
    except ValueError:
        pass
    # Try fenced code block
    m = re.search(r"```(?:json)?\s*\n([\s\S]*?)\n```", text)
    if m:
        try:
            return json.loads(m.group(1))
        except ValueError:
            pass
    # Try object/array slice
    for open_ch, close_ch in (("{", "}"), ("[", "]")):
        start = text.find(open_ch)
        end = text.rfind(close_ch)
        if start != -1 and end > start:
            try:
                return json.loads(text[start : end + 1])
            except ValueError:
                continue
    return None


def response_text(resp: Any) -> Optional[str]:
    """First choice content of a chat completion, or None."""
    try:
        return resp.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return None


class LLMClient:
    """Minimal wrapper to centralize per-use-case routing and logging."""

    def __init__(self) -> None:
        self.settings = get_settings()

    def chat(
        self,
        *,
        use_case: str,
        messages: List[Dict[str, Any]],
        temperature: Optional[float] = None,
        prompt_name: Optional[str] = None,
        prompt_text: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> Any:
        route = ROUTES.get(use_case, {})
        provider = route.get("provider", "openai")
        model = route.get("model") or self.settings.openai_model or "gpt-4o-mini"
        op = route.get("operation", "chat")
        temp = temperature if temperature is not None else route.get("temperature")

        if provider != "openai":
            raise NotImplementedError(f"Provider not implemented: {provider}")

        from openai import OpenAI
        client = OpenAI(api_key=api_key or self.settings.openai_api_key, timeout=self.settings.lookup_timeout_seconds)

        kwargs: Dict[str, Any] = {"model": model, "messages": messages}
        # Only pass temperature if explicitly provided (some models only accept default)
        if temp is not None:
            kwargs["temperature"] = temp
        if route.get("json_output"):
            kwargs["response_format"] = {"type": "json_object"}

        t0 = time.time()
        try:
            resp = client.chat.completions.create(**kwargs)
        except Exception as e:
            log_call(
                caller=f"llm_client.chat:{use_case}",
                provider=provider,
                model=model,
                operation=op,
                prompt_hash=sha256_text(prompt_text),
                duration_ms=int((time.time() - t0) * 1000),
                status="error",
                error=str(e),
                extras={"prompt_name": prompt_name} if prompt_name else None,
            )
            raise
        dt_ms = int((time.time() - t0) * 1000)

        usage_obj = None
        usage = getattr(resp, "usage", None)
        if usage:
            usage_obj = {
                "prompt_tokens": getattr(usage, "prompt_tokens", None),
                "completion_tokens": getattr(usage, "completion_tokens", None),
                "total_tokens": getattr(usage, "total_tokens", None),
            }

        log_call(
            caller=f"llm_client.chat:{use_case}",
            provider=provider,
            model=model,
            operation=op,
            prompt_hash=sha256_text(prompt_text),
            duration_ms=dt_ms,
            status="ok",
            usage=usage_obj,
            extras={"prompt_name": prompt_name} if prompt_name else None,
        )
        return resp
