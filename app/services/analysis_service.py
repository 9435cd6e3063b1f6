from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from app.parsing.parse import ResumeExtractionError
from app.schemas.analysis import AnalysisResult, InvalidJobPosting
from app.services.llm import LLMServiceError, json_completion
from app.services.prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt

logger = logging.getLogger(__name__)

_DEFAULT_INVALID_MESSAGE = "The provided text does not appear to be a valid job posting."


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "unknown validation error"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid')}" if location else str(first.get("msg", "invalid"))


def parse_analysis_response(payload: dict[str, Any]) -> AnalysisResult | InvalidJobPosting:
    if payload.get("error") == "invalid_job_posting":
        try:
            return InvalidJobPosting.model_validate(payload)
        except ValidationError:
            return InvalidJobPosting(message=str(payload.get("message") or _DEFAULT_INVALID_MESSAGE))

    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as exc:
        detail = _first_error(exc)
        logger.warning("analysis_invalid_structure errors=%s first=%s", exc.error_count(), detail)
        raise LLMServiceError(f"AI analysis had an invalid structure ({detail}). Try again.", code="llm_invalid") from exc


async def analyze_resume(resume_text: str, job_posting: str) -> AnalysisResult | InvalidJobPosting:
    if not resume_text.strip():
        raise ResumeExtractionError("Could not extract any text from the resume.")

    payload = await json_completion(
        system_prompt=ANALYSIS_SYSTEM_PROMPT,
        user_prompt=build_analysis_prompt(resume_text, job_posting),
        temperature=0.3,
        max_output_tokens=2000,
        task="analyze",
    )
    result = parse_analysis_response(payload)
    if isinstance(result, InvalidJobPosting):
        logger.info("analysis_invalid_job_posting posting_len=%s", len(job_posting))
    else:
        logger.info("analysis_complete overall=%s", result.overall_score)
    return result
