import asyncio

from fastapi import APIRouter, Depends

from ats_engine.ai.client import ExtractionClient
from ats_engine.ai.factory import get_extraction_client
from ats_engine.schemas.requests import AIHealthResponse

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy"}


@router.get(
    "/ai/health",
    response_model=AIHealthResponse,
    summary="AI Health Check",
    description="Report whether the text-generation backend is reachable. Results are cached.",
)
async def ai_health_check(client: ExtractionClient = Depends(get_extraction_client)):
    available = await asyncio.to_thread(client.is_available)
    return AIHealthResponse(
        configured=client.configured,
        available=available,
        status=client.availability.status.value,
    )
