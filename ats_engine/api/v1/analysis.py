import asyncio
import logging
from io import BytesIO

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from ats_engine.ai.client import ExtractionClient
from ats_engine.ai.factory import get_extraction_client
from ats_engine.core.config import settings
from ats_engine.core.rate_limit import rate_limit
from ats_engine.parsing import TextExtractionFailed
from ats_engine.schemas.analysis import (
    AnalysisResult,
    ExtractionResult,
    JobRoleAnalysisResult,
    ResumeImprovementReport,
)
from ats_engine.schemas.requests import (
    ExtractKeywordsRequest,
    ExtractTextResponse,
    JobDescriptionAnalysisRequest,
    ResumeAIRequest,
    ResumeTextRequest,
    RoleAnalysisRequest,
)
from ats_engine.services.analysis_service import AnalysisService
from ats_engine.services.dependencies import get_analysis_service

logger = logging.getLogger(__name__)

router = APIRouter()

_READ_CHUNK_BYTES = 64 * 1024


def _require_text(value: str | None, label: str = "Resume text") -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{label} is required")
    return value


async def _read_pdf_text(file: UploadFile, service: AnalysisService) -> str:
    filename = file.filename or "uploaded-file"
    if not filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only PDF files are supported.")

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(_READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)

    try:
        return await asyncio.to_thread(service.extract_text, BytesIO(b"".join(chunks)))
    except TextExtractionFailed as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def _role_or_404(service: AnalysisService, text: str, role: str) -> AnalysisResult:
    result = service.analyze_by_role(text, role)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Role '{role}' not found.")
    return result


@router.post("/analyze", response_model=AnalysisResult)
@rate_limit()
async def analyze(
    request: Request,
    payload: ResumeTextRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    _ = request
    return service.analyze_generic(_require_text(payload.text))


@router.post("/analyze/job-description", response_model=AnalysisResult)
@rate_limit()
async def analyze_job_description(
    request: Request,
    payload: JobDescriptionAnalysisRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    _ = request
    text = _require_text(payload.text)
    job_description = _require_text(payload.job_description, "Job description")
    return service.analyze_with_job_description(text, job_description)


@router.post("/analyze/role", response_model=AnalysisResult)
@rate_limit()
async def analyze_role(
    request: Request,
    payload: RoleAnalysisRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    _ = request
    text = _require_text(payload.text)
    role = _require_text(payload.role, "Selected role")
    return _role_or_404(service, text, role)


@router.post("/analyze/job-role", response_model=AnalysisResult)
@rate_limit()
async def analyze_job_role_full(
    request: Request,
    payload: ResumeTextRequest,
    service: AnalysisService = Depends(get_analysis_service),
    client: ExtractionClient = Depends(get_extraction_client),
):
    _ = request
    text = _require_text(payload.text)
    return await asyncio.to_thread(service.analyze_with_job_role, text, client)


@router.post("/analyze/file", response_model=AnalysisResult)
@rate_limit()
async def analyze_file(
    request: Request,
    file: UploadFile = File(...),
    job_description: str | None = Form(default=None),
    role: str | None = Form(default=None),
    service: AnalysisService = Depends(get_analysis_service),
):
    _ = request
    text = await _read_pdf_text(file, service)
    if role and role.strip():
        return _role_or_404(service, text, role.strip())
    if job_description and job_description.strip():
        return service.analyze_with_job_description(text, job_description)
    return service.analyze_generic(text)


@router.post("/analyze/resume-ai", response_model=ResumeImprovementReport)
@rate_limit()
async def analyze_resume_ai(
    request: Request,
    payload: ResumeAIRequest,
    service: AnalysisService = Depends(get_analysis_service),
    client: ExtractionClient = Depends(get_extraction_client),
):
    _ = request
    text = _require_text(payload.text)
    return await asyncio.to_thread(service.analyze_resume_with_ai, text, client, payload.job_description)


@router.post("/extract-text", response_model=ExtractTextResponse)
@rate_limit()
async def extract_text(
    request: Request,
    file: UploadFile = File(...),
    service: AnalysisService = Depends(get_analysis_service),
):
    _ = request
    text = await _read_pdf_text(file, service)
    return ExtractTextResponse(filename=file.filename or "uploaded-file", text=text, chars=len(text))


@router.post("/extract-keywords", response_model=ExtractionResult)
@rate_limit()
async def extract_keywords(
    request: Request,
    payload: ExtractKeywordsRequest,
    client: ExtractionClient = Depends(get_extraction_client),
):
    _ = request
    job_description = _require_text(payload.job_description, "Job description")
    result = await asyncio.to_thread(client.extract_keywords, job_description, payload.resume_text)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error_message)
    return result


@router.post("/analyze-job-role", response_model=JobRoleAnalysisResult)
@rate_limit()
async def analyze_job_role(
    request: Request,
    payload: ResumeTextRequest,
    client: ExtractionClient = Depends(get_extraction_client),
):
    _ = request
    text = _require_text(payload.text)
    result = await asyncio.to_thread(client.analyze_job_role, text)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error_message)
    return result
