# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Settings the API cannot serve requests without.
    Returns the names that are missing.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")
    if not settings.CLERK_ISSUER_URL:
        missing.append("CLERK_ISSUER_URL")

    return missing


def validate_optional_config() -> List[str]:
    warnings = []

    if not settings.CLERK_WEBHOOK_SECRET:
        warnings.append("CLERK_WEBHOOK_SECRET (identity sync webhook will answer 500)")
    if not settings.CLERK_AUDIENCE:
        warnings.append("CLERK_AUDIENCE (token audience is not checked)")
    if not settings.SMTP_HOST:
        warnings.append("SMTP_HOST (email notifications disabled)")

    return warnings


def validate_config_on_startup():
    """
    Raises RuntimeError for missing required settings in production;
    elsewhere they are logged so local runs and tests can start.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.ENV == "production":
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        logger.warning(error_msg)

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    if not missing_required:
        logger.info("Configuration validation passed")
