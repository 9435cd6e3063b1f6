from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from app.schemas.base import CamelModel


class StoredJobRecord(CamelModel):
    payload: str
    recorded_at: datetime
    source_hash: str = Field(min_length=64, max_length=64)


class StoredInsightsRecord(CamelModel):
    payload: Any
    generated_at: datetime


class CacheStats(CamelModel):
    total_entries: int = 0
    job_postings: int = 0
    insights: int = 0
    memory_usage: str | None = None
