from functools import lru_cache

from ats_engine.ai.client import ExtractionClient
from ats_engine.core.config import settings


@lru_cache(maxsize=1)
def get_extraction_client() -> ExtractionClient:
    # one instance per process so the availability cache is shared
    return ExtractionClient(settings.ai_config())
