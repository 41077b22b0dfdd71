from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import logging
from contextlib import asynccontextmanager

from famcal.core.config import settings
from famcal.core.logging import setup_logging, RequestLoggingMiddleware
from famcal.core.error_handler import setup_error_handlers
from famcal.core.metrics import setup_metrics
from famcal.core.middleware import SecurityHeadersMiddleware, BodySizeLimitMiddleware
from famcal.api.v1.api import api_router
from famcal.db.database import init_db, dispose_db

setup_logging()
logger = logging.getLogger(__name__)

class WelcomeResponse(BaseModel):
    message: str

class HealthResponse(BaseModel):
    status: str
    version: str

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle startup and shutdown events.
    """
    logger.info("Starting up application...")
    await init_db()

    yield

    logger.info("Shutting down application...")
    await dispose_db()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Family Calendar API - a shared calendar for parents and children.

    ## Features

    * 📅 **Events**
        * Parents create, update and delete events
        * Daily, weekly, biweekly and monthly recurrence
        * All-day events and color categories

    * 🗓️ **Calendar views**
        * Occurrences expanded on demand for any window
        * Day and week time grids with positioned events
        * Month grids bucketed by day

    * 👨‍👩‍👧 **Family members**
        * Children only see events assigned to them

    ## Identifying the member

    Send the acting member id in the `X-Member-ID` header.
    """,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs" if settings.SHOW_DOCS else None,
    redoc_url=f"{settings.API_V1_STR}/redoc" if settings.SHOW_DOCS else None,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan
)

# Add CORS middleware
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Add security headers middleware
if settings.SECURITY_HEADERS:
    app.add_middleware(SecurityHeadersMiddleware)

# Limit request body size
app.add_middleware(BodySizeLimitMiddleware)

# Request logging and metrics
app.add_middleware(RequestLoggingMiddleware)
setup_metrics(app)

setup_error_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get(
    "/",
    response_model=WelcomeResponse,
    status_code=status.HTTP_200_OK,
    summary="Root endpoint",
    description="Welcome endpoint for the API"
)
async def root() -> WelcomeResponse:
    """Root endpoint returning a welcome message."""
    return WelcomeResponse(message="Welcome to the Family Calendar API")

@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    include_in_schema=False
)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=settings.VERSION)
