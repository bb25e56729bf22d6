import logging
from contextlib import asynccontextmanager

from ats_engine.ai.factory import get_extraction_client
from ats_engine.services.dependencies import get_analysis_service
from ats_engine.taxonomy import TaxonomyError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # taxonomy problems are fatal; fail before serving traffic
    try:
        service = get_analysis_service()
    except TaxonomyError:
        logger.exception("taxonomy_load_failed")
        raise

    client = get_extraction_client()
    logger.info(
        "startup_ready roles=%s categories=%s ai_configured=%s",
        len(service.taxonomy.keyword_sets()),
        len(service.taxonomy.all_categories()),
        client.configured,
    )
    yield
