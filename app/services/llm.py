from __future__ import annotations

import json
import logging
import os
import re
import time
import uuid
from functools import lru_cache
from typing import Any

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```json\n?|\n?```")


class LLMServiceError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def llm_enabled() -> bool:
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or None),
        timeout=float(os.getenv("OPENAI_TIMEOUT_S", "60")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )


def _model() -> str:
    return (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()


def strip_json_fences(content: str) -> str:
    return _JSON_FENCE_RE.sub("", content).strip()


async def json_completion(
    *,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.3,
    max_output_tokens: int = 2000,
    task: str = "unknown",
) -> dict[str, Any]:
    if not llm_enabled():
        raise LLMServiceError("OpenAI is not configured. Set OPENAI_API_KEY.", code="llm_disabled")

    run_id = uuid.uuid4().hex[:8]
    started = time.perf_counter()
    logger.info("llm_request run=%s task=%s model=%s prompt_len=%s", run_id, task, _model(), len(user_prompt))
    try:
        response = await _client().chat.completions.create(
            model=_model(),
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            response_format={"type": "json_object"},
            max_tokens=max_output_tokens,
        )
    except Exception as exc:  # noqa: BLE001 - surfaced to the route as 503
        logger.warning("llm_request_failed run=%s task=%s model=%s: %s", run_id, task, _model(), exc)
        raise LLMServiceError("The AI service is temporarily unavailable. Try again.", code="llm_exception") from exc

    latency_ms = int((time.perf_counter() - started) * 1000)
    content = response.choices[0].message.content if response.choices else ""
    if not content:
        logger.warning("llm_empty_response run=%s task=%s latency_ms=%s", run_id, task, latency_ms)
        raise LLMServiceError("The AI service returned an empty response. Try again.", code="llm_empty")

    cleaned = strip_json_fences(content)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning(
            "llm_invalid_json run=%s task=%s latency_ms=%s preview=%r",
            run_id,
            task,
            latency_ms,
            cleaned[:500],
        )
        raise LLMServiceError("Failed to parse AI response. Try again.", code="llm_invalid") from exc

    if not isinstance(parsed, dict):
        raise LLMServiceError("AI response was not a JSON object. Try again.", code="llm_invalid")

    logger.info("llm_request_done run=%s task=%s latency_ms=%s", run_id, task, latency_ms)
    return parsed
