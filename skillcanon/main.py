import logging

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from skillcanon.api.v1.health import router as health_router
from skillcanon.api.v1.skills import router as skills_router
from skillcanon.api.v1.taxonomy import router as taxonomy_router
from skillcanon.core.rate_limit import limiter
from skillcanon.core.config import settings
from skillcanon.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Skill Canonicalisation API", version="0.1.0", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(taxonomy_router, prefix="/v1", tags=["Taxonomy"])
app.include_router(skills_router, prefix="/v1", tags=["Skills"])
