from __future__ import annotations

import logging
from datetime import datetime, timezone
from urllib.parse import urlparse

import httpx

from app.cache.keys import derive_key
from app.cache.store import CacheStore
from app.core.config import settings
from app.schemas.scrape import ScrapeResponse

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 100


class InvalidJobUrlError(ValueError):
    pass


class InsufficientContentError(ValueError):
    pass


class ScrapeFailedError(RuntimeError):
    pass


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname)


async def fetch_reader_markdown(url: str) -> str:
    """Fetch a page as markdown through the hosted reader service."""
    headers = {
        "X-Target-Selector": "body",
        "Accept": "text/plain",
    }
    if settings.jina_api_key:
        headers["Authorization"] = f"Bearer {settings.jina_api_key}"

    reader_url = f"{settings.jina_reader_base_url}/{url}"
    try:
        async with httpx.AsyncClient(timeout=settings.scrape_timeout_s, follow_redirects=True) as client:
            response = await client.get(reader_url, headers=headers)
    except httpx.HTTPError as exc:
        raise ScrapeFailedError(f"Reader request failed: {exc}") from exc

    if response.status_code >= 400:
        raise ScrapeFailedError(f"Reader request failed: HTTP {response.status_code}")
    return response.text or ""


async def scrape_job_posting(url: str, store: CacheStore) -> ScrapeResponse:
    url = url.strip()
    if not is_valid_url(url):
        raise InvalidJobUrlError("Invalid URL format. Please provide a valid HTTP or HTTPS URL.")

    url_hash = derive_key(url)
    cached = await store.get_job_posting(url)
    if cached is not None:
        return ScrapeResponse(
            job_posting=cached.payload,
            url_hash=cached.source_hash,
            extracted_at=cached.recorded_at,
            from_cache=True,
        )

    logger.info("scrape_started url_hash=%s", url_hash[:12])
    content = await fetch_reader_markdown(url)
    if len(content.strip()) < MIN_CONTENT_CHARS:
        logger.info("scrape_insufficient_content url_hash=%s chars=%s", url_hash[:12], len(content.strip()))
        raise InsufficientContentError(
            "Could not extract sufficient content from the webpage. "
            "The page might be protected or contain minimal text."
        )

    await store.set_job_posting(url, content)
    logger.info("scrape_complete url_hash=%s chars=%s", url_hash[:12], len(content))
    return ScrapeResponse(
        job_posting=content,
        url_hash=url_hash,
        extracted_at=datetime.now(timezone.utc),
        from_cache=False,
    )
