"""
Health Check Endpoints

Provides health and readiness checks for the PM Copilot API.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from pm_copilot.config import ConfigurationError, load_themes_config


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: datetime


class ConfigHealthResponse(BaseModel):
    """Theme configuration check response."""
    loaded: bool
    config_version: Optional[int] = None
    themes_count: Optional[int] = None
    error: Optional[str] = None


@router.get("/health", response_model=HealthResponse)
def health_check():
    """
    Basic health check endpoint.

    Returns 200 OK if the API is running.
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc)
    )


@router.get("/health/config", response_model=ConfigHealthResponse)
def config_health_check():
    """
    Theme configuration check.

    Loads and validates the theme config file and reports what was found.
    """
    try:
        config = load_themes_config()
    except ConfigurationError as e:
        return ConfigHealthResponse(loaded=False, error=str(e))

    return ConfigHealthResponse(
        loaded=True,
        config_version=config.version,
        themes_count=len(config.themes),
    )
