from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME_TYPE = "text/plain"
SUPPORTED_MIME_TYPES = (DOCX_MIME_TYPE, TEXT_MIME_TYPE)


class ExtractedText(BaseModel):
    mime_type: str
    text: str
    characters: int = Field(ge=0)
    warnings: list[str] = Field(default_factory=list)

    @field_validator("mime_type")
    @classmethod
    def _validate_mime_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in SUPPORTED_MIME_TYPES:
            raise ValueError(f"mime_type must be one of: {', '.join(SUPPORTED_MIME_TYPES)}")
        return normalized
