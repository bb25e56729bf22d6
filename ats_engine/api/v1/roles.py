from fastapi import APIRouter, Depends, HTTPException, status

from ats_engine.schemas.analysis import RoleOption
from ats_engine.schemas.requests import KeywordListResponse
from ats_engine.services.analysis_service import AnalysisService
from ats_engine.services.dependencies import get_analysis_service

router = APIRouter()

_SUBGROUPS = ("primary", "technical", "process", "tools")


def _require_role(service: AnalysisService, role_key: str) -> None:
    if service.taxonomy.get_keyword_set(role_key) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Role '{role_key}' not found.")


@router.get("/roles", response_model=list[RoleOption])
async def list_roles(service: AnalysisService = Depends(get_analysis_service)):
    return service.taxonomy.available_roles()


@router.get("/roles/{role_key}/keywords", response_model=KeywordListResponse)
async def role_keywords(role_key: str, service: AnalysisService = Depends(get_analysis_service)):
    _require_role(service, role_key)
    return KeywordListResponse(id=role_key, keywords=service.taxonomy.keywords_for_role(role_key))


@router.get("/roles/{role_key}/keywords/{subgroup}", response_model=KeywordListResponse)
async def role_subgroup_keywords(
    role_key: str,
    subgroup: str,
    service: AnalysisService = Depends(get_analysis_service),
):
    _require_role(service, role_key)
    if subgroup.lower() not in _SUBGROUPS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown keyword group '{subgroup}'. Allowed: {', '.join(_SUBGROUPS)}.",
        )
    return KeywordListResponse(
        id=f"{role_key}/{subgroup.lower()}",
        keywords=service.taxonomy.keywords_for_role_subgroup(role_key, subgroup),
    )
