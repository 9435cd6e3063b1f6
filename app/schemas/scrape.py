from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class ScrapeRequest(CamelModel):
    url: str = Field(min_length=1, max_length=2048)


class ScrapeResponse(CamelModel):
    success: bool = True
    job_posting: str
    url_hash: str
    extracted_at: datetime
    from_cache: bool = False
