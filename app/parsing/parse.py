from __future__ import annotations

import logging
from io import BytesIO

from docx import Document

from .models import DOCX_MIME_TYPE, SUPPORTED_MIME_TYPES, TEXT_MIME_TYPE, ExtractedText

logger = logging.getLogger(__name__)

MAX_RESUME_BYTES = 2 * 1024 * 1024  # 2 MB

_EXTENSION_MIME_TYPES = {
    "docx": DOCX_MIME_TYPE,
    "txt": TEXT_MIME_TYPE,
}
_GENERIC_MIME_TYPES = {"", "application/octet-stream"}


class UnsupportedResumeTypeError(ValueError):
    pass


class ResumeExtractionError(ValueError):
    pass


def resolve_mime_type(mime_type: str | None, filename: str = "") -> str:
    normalized = (mime_type or "").split(";")[0].strip().lower()
    if normalized in _GENERIC_MIME_TYPES:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        normalized = _EXTENSION_MIME_TYPES.get(ext, normalized)
    if normalized not in SUPPORTED_MIME_TYPES:
        shown = normalized or "unknown"
        raise UnsupportedResumeTypeError(
            f"Unsupported file type: {shown}. Please upload a Word document (.docx) or text file (.txt)"
        )
    return normalized


def _parse_txt(content: bytes) -> tuple[str, list[str]]:
    try:
        return content.decode("utf-8"), []
    except UnicodeDecodeError:
        return content.decode("latin-1"), ["Resume is not valid UTF-8; decoded as latin-1."]


def _parse_docx(content: bytes) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        document = Document(BytesIO(content))
    except Exception as exc:
        raise ResumeExtractionError("Failed to extract text from Word document") from exc

    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text and cell.text.strip()]
            if cells:
                paragraphs.append(" | ".join(cells))
    if not paragraphs:
        warnings.append("No extractable text found in DOCX.")
    return "\n".join(paragraphs), warnings


def extract_resume_text(content: bytes, mime_type: str | None, filename: str = "") -> ExtractedText:
    resolved = resolve_mime_type(mime_type, filename)
    if resolved == DOCX_MIME_TYPE:
        text, warnings = _parse_docx(content)
    else:
        text, warnings = _parse_txt(content)

    logger.info("resume_text_extracted mime_type=%s bytes=%s chars=%s", resolved, len(content), len(text))
    return ExtractedText(
        mime_type=resolved,
        text=text,
        characters=len(text),
        warnings=warnings,
    )
