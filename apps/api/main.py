import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from apps.api.error_handlers import register_error_handlers
from apps.api.middlewares.metrics import MetricsMiddleware
from apps.api.routers import ai, health, matches, profiles, recommendations, safety, swipes
from core import close_redis
from core.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    logger.info(f"Spark API starting (environment={settings.environment})")
    yield
    # Shutdown
    await close_redis()


app = FastAPI(
    title="Spark API",
    description="Profiles, swipes, matches and chat threads for the Spark dating app",
    version="0.1.0",
    lifespan=lifespan,
)

# Middlewares
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])
app.include_router(recommendations.router, prefix="/api/recommendations", tags=["recommendations"])
app.include_router(swipes.router, prefix="/api/swipes", tags=["swipes"])
app.include_router(matches.router, prefix="/api/matches", tags=["matches"])
app.include_router(safety.router, prefix="/api", tags=["safety"])
app.include_router(ai.router, prefix="/api/ai", tags=["ai"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"status": "ok", "service": "spark"}


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
