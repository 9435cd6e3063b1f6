from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.deps import get_cache_store
from app.cache.store import CacheStore
from app.schemas.cache import HealthResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check the health status of the application and its cache.",
)
async def health_check(store: CacheStore = Depends(get_cache_store)):
    cache_ok = await store.ping()
    return HealthResponse(
        status="healthy",
        cache="connected" if cache_ok else "unavailable",
        timestamp=datetime.now(timezone.utc),
    )
