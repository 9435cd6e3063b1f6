from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.deps import get_cache_store
from app.cache.store import CacheStore
from app.core.rate_limit import rate_limit
from app.schemas.insights import InsightsRequest, InsightsResponse
from app.services.insights_service import get_or_generate_insights
from app.services.llm import LLMServiceError

router = APIRouter()


@router.post("/insights", response_model=InsightsResponse)
@rate_limit()
async def insights(
    request: Request,
    payload: InsightsRequest,
    store: CacheStore = Depends(get_cache_store),
):
    _ = request
    try:
        return await get_or_generate_insights(payload.job_analysis, store)
    except LLMServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to generate insights. Please try again.",
        ) from exc
