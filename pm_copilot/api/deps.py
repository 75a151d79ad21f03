"""
FastAPI Dependency Injection

Provides the theme configuration to endpoints. The config file is read per
request so edits take effect without a restart; tests override this
dependency with an in-memory config.
"""

from fastapi import HTTPException

from pm_copilot.config import ConfigurationError, load_themes_config
from pm_copilot.models import ThemesConfig


def get_themes_config() -> ThemesConfig:
    """
    FastAPI dependency for the validated theme configuration.

    Usage in endpoints:
        @router.post("/synthesize")
        def synthesize(config: ThemesConfig = Depends(get_themes_config)):
            ...
    """
    try:
        return load_themes_config()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
