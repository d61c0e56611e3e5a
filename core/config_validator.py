# core/config_validator.py

from pathlib import Path
from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    # Required for the persistence gateway
    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns list of problems (warnings only).
    """
    warnings = []

    if settings.ROLE_INHERITANCE_FILE and not Path(settings.ROLE_INHERITANCE_FILE).is_file():
        warnings.append(
            f"ROLE_INHERITANCE_FILE ({settings.ROLE_INHERITANCE_FILE}) does not exist; "
            "startup will fail when the inheritance map is loaded"
        )

    if not settings.BACKEND_CORS_ORIGINS:
        warnings.append("BACKEND_CORS_ORIGINS (optional, admin frontend cannot call the API cross-origin)")

    return warnings


def log_config_report() -> None:
    """Log missing/optional settings once at startup. Never fatal."""
    for name in validate_required_config():
        logger.error(f"Missing required setting: {name}")
    for warning in validate_optional_config():
        logger.warning(f"Config warning: {warning}")
