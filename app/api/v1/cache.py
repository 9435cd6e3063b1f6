from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.deps import get_cache_store
from app.cache.store import CacheStore
from app.core.security import require_api_key
from app.schemas.cache import CacheStatsBody, CacheStatsResponse

router = APIRouter()


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(
    store: CacheStore = Depends(get_cache_store),
    _: None = Depends(require_api_key),
):
    stats = await store.get_stats()
    return CacheStatsResponse(
        success=True,
        stats=CacheStatsBody(
            total_entries=stats.total_entries,
            job_postings=stats.job_postings,
            insights=stats.insights,
            memory_usage=stats.memory_usage or "N/A",
            timestamp=datetime.now(timezone.utc),
        ),
    )
