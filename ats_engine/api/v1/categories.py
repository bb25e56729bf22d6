import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ats_engine.ai.client import ExtractionClient
from ats_engine.ai.factory import get_extraction_client
from ats_engine.core.rate_limit import rate_limit
from ats_engine.schemas.analysis import SmartCategoryAnalysis
from ats_engine.schemas.requests import CategoryListResponse, KeywordListResponse, ResumeTextRequest
from ats_engine.services.analysis_service import AnalysisService
from ats_engine.services.dependencies import get_analysis_service

router = APIRouter()


def _listing(categories) -> CategoryListResponse:
    return CategoryListResponse(categories=categories, total=len(categories))


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(service: AnalysisService = Depends(get_analysis_service)):
    return _listing(service.taxonomy.all_categories())


@router.get("/categories/search", response_model=CategoryListResponse)
async def search_categories(
    q: str = Query(default="", max_length=200),
    service: AnalysisService = Depends(get_analysis_service),
):
    return _listing(service.recommender.search_categories(q))


@router.get("/categories/smart", response_model=CategoryListResponse)
async def smart_categories(
    role: str = Query(..., min_length=1, max_length=200),
    confidence: float = Query(default=0.0, ge=0.0, le=1.0),
    service: AnalysisService = Depends(get_analysis_service),
):
    return _listing(service.recommender.categories_for_job_role(role, confidence))


@router.post("/categories/smart-analysis", response_model=SmartCategoryAnalysis)
@rate_limit()
async def smart_category_analysis(
    request: Request,
    payload: ResumeTextRequest,
    service: AnalysisService = Depends(get_analysis_service),
    client: ExtractionClient = Depends(get_extraction_client),
):
    _ = request
    if not payload.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume text is required")
    return await asyncio.to_thread(service.smart_category_analysis, payload.text, client)


@router.get("/categories/{category_id}/keywords", response_model=KeywordListResponse)
async def category_keywords(category_id: str, service: AnalysisService = Depends(get_analysis_service)):
    if not service.taxonomy.category_exists(category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category '{category_id}' not found.")
    return KeywordListResponse(id=category_id, keywords=service.taxonomy.keywords_for_category(category_id))
