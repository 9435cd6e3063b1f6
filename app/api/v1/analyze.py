import base64
import binascii
import logging

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from app.core.rate_limit import rate_limit
from app.parsing.parse import (
    MAX_RESUME_BYTES,
    ResumeExtractionError,
    UnsupportedResumeTypeError,
    extract_resume_text,
)
from app.schemas.analysis import AnalysisResult, AnalyzeJsonRequest, InvalidJobPosting
from app.services.analysis_service import analyze_resume
from app.services.llm import LLMServiceError

router = APIRouter()
logger = logging.getLogger(__name__)

_SIZE_ERROR = f"File size exceeds {MAX_RESUME_BYTES // (1024 * 1024)}MB limit. Please upload a smaller file."


async def _run_analysis(content: bytes, mime_type: str | None, filename: str, job_posting: str):
    if not job_posting.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Resume file and job posting are required",
        )
    try:
        extracted = extract_resume_text(content, mime_type, filename)
        return await analyze_resume(extracted.text, job_posting)
    except (UnsupportedResumeTypeError, ResumeExtractionError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except LLMServiceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.post("/analyze", response_model=AnalysisResult | InvalidJobPosting)
@rate_limit()
async def analyze(
    request: Request,
    resume: UploadFile = File(...),
    job_posting: str = Form(..., alias="jobPosting"),
):
    _ = request
    filename = resume.filename or "resume"

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await resume.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_RESUME_BYTES:
            logger.info("analyze_rejected reason=size bytes>%s", MAX_RESUME_BYTES)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_SIZE_ERROR)
        chunks.append(chunk)

    return await _run_analysis(b"".join(chunks), resume.content_type, filename, job_posting)


@router.post("/analyze/json", response_model=AnalysisResult | InvalidJobPosting)
@rate_limit()
async def analyze_json(request: Request, payload: AnalyzeJsonRequest):
    _ = request
    try:
        content = base64.b64decode(payload.resume_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Resume file must be valid base64.",
        ) from exc

    if len(content) > MAX_RESUME_BYTES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_SIZE_ERROR)

    return await _run_analysis(
        content,
        payload.mime_type or "text/plain",
        payload.file_name or "",
        payload.job_posting,
    )
