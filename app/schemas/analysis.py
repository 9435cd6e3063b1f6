from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from app.schemas.base import CamelModel

Score = Literal["Poor", "Fair", "Good", "Great", "Excellent"]
Impact = Literal["High", "Medium", "Low"]
RecommendationCategory = Literal["Skills", "Experience", "Keywords", "Qualifications"]
FiveItems = Annotated[list[str], Field(min_length=5, max_length=5)]


class CategoryScores(CamelModel):
    skills_match: Score
    experience_level: Score
    keyword_optimization: Score
    qualifications_alignment: Score


class JobAnalysis(CamelModel):
    required_skills: FiveItems
    key_experiences: FiveItems
    primary_responsibilities: FiveItems


class Recommendation(CamelModel):
    id: int = Field(ge=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    impact: Impact
    category: RecommendationCategory


class AnalysisResult(CamelModel):
    overall_score: Score
    category_scores: CategoryScores
    executive_summary: str = Field(min_length=1)
    job_analysis: JobAnalysis
    recommendations: list[Recommendation] = Field(min_length=5, max_length=5)


class InvalidJobPosting(CamelModel):
    error: Literal["invalid_job_posting"] = "invalid_job_posting"
    message: str
    suggestions: list[str] = Field(default_factory=list)


class AnalyzeJsonRequest(CamelModel):
    resume_base64: str = Field(min_length=1)
    file_name: str | None = Field(default=None, max_length=255)
    mime_type: str | None = Field(default=None, max_length=200)
    job_posting: str = Field(min_length=1, max_length=60000)
