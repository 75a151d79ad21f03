"""
PM Copilot API - Main Application

FastAPI application exposing feedback synthesis and product planning over
records supplied by the caller.

Run with:
    uvicorn pm_copilot.api.main:app --reload --port 8000

API Documentation available at:
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pm_copilot import __version__
from pm_copilot.api.routers import analysis, health
from pm_copilot.config import get_log_level
from pm_copilot.logging_utils import configure_safe_logging

configure_safe_logging(get_log_level())

# Suppress noisy libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


# Create FastAPI application
app = FastAPI(
    title="PM Copilot API",
    description="""
    Customer-signal triangulation for product planning.

    ## Features

    - **Synthesis**: Match support tickets and feature requests to configured themes
    - **Product Plan**: Ranked priorities with evidence and customer quotes
    - **Emerging Themes**: Recurring phrases in feedback no theme covers

    ## Privacy

    Every record is PII-scrubbed (SSN, credit card, email, phone) before any
    matching or scoring, and customer email fields are always redacted.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS for local dashboards
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8501",
        "http://127.0.0.1:8501",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health.router)
app.include_router(analysis.router)


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": "PM Copilot API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
