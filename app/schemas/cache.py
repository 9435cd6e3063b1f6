from __future__ import annotations

from datetime import datetime

from app.schemas.base import CamelModel


class CacheStatsBody(CamelModel):
    total_entries: int
    job_postings: int
    insights: int
    memory_usage: str = "N/A"
    timestamp: datetime


class CacheStatsResponse(CamelModel):
    success: bool = True
    stats: CacheStatsBody


class HealthResponse(CamelModel):
    status: str = "healthy"
    cache: str
    timestamp: datetime
