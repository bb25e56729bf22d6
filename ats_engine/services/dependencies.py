from functools import lru_cache

from ats_engine.services.analysis_service import AnalysisService


@lru_cache(maxsize=1)
def get_analysis_service() -> AnalysisService:
    return AnalysisService()
