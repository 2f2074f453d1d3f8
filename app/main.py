"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import settings
from app.middleware.error_handler import ErrorHandlerMiddleware
from app.api.v1.routers import advisory, fields, sessions

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_requests}/minute"],
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Forecast provider: {settings.openweather_base_url}, "
                f"forecast_days={settings.forecast_days}, "
                f"api_key_configured={bool(settings.openweather_api_key)}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    from app.infrastructure.weather_api_client import get_weather_client
    logger.info("Shutting down application...")
    client = get_weather_client()
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Field Advisory API for precision agriculture

    This API turns a field selected on a map into soil-health, weather and
    fertilizer-recommendation panels.

    ## Features

    - **Field Geometry**: Resolve a field boundary to its centroid and convert
      field areas between sq m, sq ft, acres, hectares, bigha and katha
    - **Weather Advisory**: Weekly risk alerts, projected soil drift and
      recommendations from a 7-day forecast
    - **Sessions**: Immutable per-session state; forecasts fetched for an
      outdated field selection are discarded
    - **Robust Error Handling**: Configuration and provider errors are reported
      in the session state instead of failing the request
    - **Rate Limiting**: Protects the API from abuse

    ## Weather Rules

    1. Heavy rain (>= 50 mm, or >= 30 mm with pop >= 0.8) projects N/K leaching
    2. Three or more consecutive dry-hot days project drought stress
    3. High wind and humid-warm days raise per-day alerts
    4. Soil statuses are recomputed from fixed agronomic thresholds
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(fields.router, prefix="/api/v1")
app.include_router(advisory.router, prefix="/api/v1")
app.include_router(sessions.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
