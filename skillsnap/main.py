import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from skillsnap.api.v1.health import router as health_router
from skillsnap.api.v1.analysis import router as analysis_router
from skillsnap.api.v1.roadmap import router as roadmap_router
from skillsnap.api.v1.progress import router as progress_router
from skillsnap.api.v1.analytics import router as analytics_router
from skillsnap.core.cors import cors_middleware_options
from skillsnap.core.rate_limit import limiter
from skillsnap.core.config import settings
from dotenv import load_dotenv
from skillsnap.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="SkillSnap API", version="0.1.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware, **cors_middleware_options())
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(analysis_router, prefix="/v1", tags=["Resume Analysis"])
app.include_router(roadmap_router, prefix="/v1", tags=["Roadmap"])
app.include_router(progress_router, prefix="/v1", tags=["Progress"])
app.include_router(analytics_router, prefix="/v1", tags=["Analytics"])
