from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field

from app.schemas.base import CamelModel

InsightCategory = Literal["market", "position", "strategic"]
AttributeList = Annotated[list[str], Field(min_length=1, max_length=25)]


class JobAnalysisInput(CamelModel):
    required_skills: AttributeList
    key_experiences: AttributeList
    primary_responsibilities: AttributeList


class InsightsRequest(CamelModel):
    job_analysis: JobAnalysisInput


class AIInsight(CamelModel):
    category: InsightCategory
    title: str
    content: str
    icon: str = ""


class InsightsResponse(CamelModel):
    insights: list[AIInsight]
    generated_at: datetime
    from_cache: bool = False
