from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.deps import get_cache_store
from app.cache.store import CacheStore
from app.core.rate_limit import rate_limit
from app.schemas.scrape import ScrapeRequest, ScrapeResponse
from app.services.scrape_service import (
    InsufficientContentError,
    InvalidJobUrlError,
    ScrapeFailedError,
    scrape_job_posting,
)

router = APIRouter()


@router.post("/scrape", response_model=ScrapeResponse)
@rate_limit()
async def scrape(
    request: Request,
    payload: ScrapeRequest,
    store: CacheStore = Depends(get_cache_store),
):
    _ = request
    try:
        return await scrape_job_posting(payload.url, store)
    except (InvalidJobUrlError, InsufficientContentError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ScrapeFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=(
                "Failed to scrape webpage. The site might be protected, require authentication, "
                "or be temporarily unavailable."
            ),
        ) from exc
