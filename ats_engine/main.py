import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from ats_engine.api.v1.analysis import router as analysis_router
from ats_engine.api.v1.categories import router as categories_router
from ats_engine.api.v1.health import router as health_router
from ats_engine.api.v1.roles import router as roles_router
from ats_engine.core.config import settings
from ats_engine.core.lifespan import lifespan
from ats_engine.core.rate_limit import limiter

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="ATS Analysis Engine API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(analysis_router, prefix="/v1", tags=["Analysis"])
app.include_router(categories_router, prefix="/v1", tags=["Categories"])
app.include_router(roles_router, prefix="/v1", tags=["Roles"])
