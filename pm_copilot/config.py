"""
Theme configuration loading.

The theme list is a freely editable JSON file, so its shape is validated
here, at the load boundary, and handed to the analysis as an immutable
ThemesConfig value. A malformed theme would otherwise silently never match,
so structural problems raise ConfigurationError instead of being skipped.

Environment:
    PM_COPILOT_THEMES_CONFIG: path to the theme config (default: config/themes.config.json)
    PM_COPILOT_LOG_LEVEL: log level for the CLI and API (default: INFO)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import load_dotenv
from pydantic import ValidationError

from .models import ThemesConfig

PROJECT_ROOT = Path(__file__).parent.parent

# Load .env file if present
env_path = PROJECT_ROOT / ".env"
if env_path.exists():
    load_dotenv(env_path)

DEFAULT_THEMES_CONFIG_PATH = PROJECT_ROOT / "config" / "themes.config.json"
THEMES_CONFIG_ENV = "PM_COPILOT_THEMES_CONFIG"
LOG_LEVEL_ENV = "PM_COPILOT_LOG_LEVEL"

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when theme configuration is structurally invalid."""


def get_themes_config_path() -> Path:
    """Resolve the theme config path from the environment."""
    override = os.getenv(THEMES_CONFIG_ENV)
    return Path(override) if override else DEFAULT_THEMES_CONFIG_PATH


def get_log_level() -> str:
    """Log level name from the environment."""
    return os.getenv(LOG_LEVEL_ENV, "INFO")


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        problems.append(f"{location}: {err.get('msg')}")
    return "; ".join(problems)


def parse_themes_config(data: Any) -> ThemesConfig:
    """
    Validate already-decoded config data.

    Args:
        data: Decoded JSON object

    Returns:
        Validated ThemesConfig

    Raises:
        ConfigurationError: if the data does not describe a valid config
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Theme config must be a JSON object, got {type(data).__name__}"
        )
    try:
        return ThemesConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid theme config: {_format_validation_error(e)}"
        ) from e


def load_themes_config(path: Optional[Union[str, Path]] = None) -> ThemesConfig:
    """
    Load and validate the theme configuration file.

    Args:
        path: Explicit config path. Falls back to PM_COPILOT_THEMES_CONFIG,
              then to config/themes.config.json.

    Returns:
        Validated ThemesConfig

    Raises:
        ConfigurationError: if the file is missing, not JSON, or malformed
    """
    config_path = Path(path) if path else get_themes_config_path()

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read theme config {config_path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Theme config {config_path} is not valid JSON: {e}") from e

    config = parse_themes_config(data)
    logger.info(
        f"Loaded {len(config.themes)} themes (config v{config.version}) from {config_path}"
    )
    return config
