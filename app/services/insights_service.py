from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from app.cache.keys import derive_insights_key
from app.cache.store import CacheStore
from app.schemas.insights import AIInsight, InsightsResponse, JobAnalysisInput
from app.services.llm import LLMServiceError, json_completion
from app.services.prompts import INSIGHTS_SYSTEM_PROMPT, build_insights_prompt

logger = logging.getLogger(__name__)


def insights_key_for(job_analysis: JobAnalysisInput) -> str:
    return derive_insights_key(job_analysis.model_dump(by_alias=True))


async def generate_insights(job_analysis: JobAnalysisInput) -> InsightsResponse:
    payload = await json_completion(
        system_prompt=INSIGHTS_SYSTEM_PROMPT,
        user_prompt=build_insights_prompt(
            job_analysis.required_skills,
            job_analysis.key_experiences,
            job_analysis.primary_responsibilities,
        ),
        temperature=0.3,
        max_output_tokens=1000,
        task="insights",
    )

    raw_items = payload.get("insights")
    if not isinstance(raw_items, list):
        raise LLMServiceError("AI response did not include insights. Try again.", code="llm_invalid")

    insights: list[AIInsight] = []
    for item in raw_items:
        try:
            insights.append(AIInsight.model_validate(item))
        except ValidationError:
            logger.debug("insight_item_skipped item=%r", item)
    if not insights:
        raise LLMServiceError("AI response did not include usable insights. Try again.", code="llm_invalid")

    return InsightsResponse(insights=insights, generated_at=datetime.now(timezone.utc))


async def get_or_generate_insights(job_analysis: JobAnalysisInput, store: CacheStore) -> InsightsResponse:
    analysis_hash = insights_key_for(job_analysis)

    cached = await store.get_insights(analysis_hash)
    if cached is not None:
        try:
            response = InsightsResponse.model_validate(cached.payload)
        except ValidationError:
            logger.warning("insights_cached_payload_invalid hash=%s", analysis_hash[:12])
        else:
            return response.model_copy(update={"from_cache": True})

    result = await generate_insights(job_analysis)
    logger.info("insights_generated hash=%s count=%s", analysis_hash[:12], len(result.insights))
    await store.set_insights(
        analysis_hash,
        result.model_dump(mode="json", by_alias=True, exclude={"from_cache"}),
    )
    return result
