"""
Configuration validation for Qanda application.

Checks run once at startup so misconfiguration shows up in the boot log
rather than on the first signup.
"""

from __future__ import annotations

from typing import Any

from .config import Settings, settings
from .database.connection import test_database_connection
from .logging import get_logger

logger = get_logger(__name__)

MIN_SECRET_LENGTH = 32


class ValidationError(Exception):
    """Raised when application validation fails."""

    pass


async def validate_database_connection() -> dict[str, Any]:
    """Validate that the database is accessible and responsive."""
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    success, error_message = await test_database_connection()
    if success:
        logger.info("Database connection validation successful")
    else:
        results["valid"] = False
        results["errors"].append(error_message)
        logger.error("Database connection validation failed", error=error_message)

    return results


def validate_auth_configuration(config: Settings | None = None) -> dict[str, Any]:
    """Validate the session signing secret and cookie flags."""
    config = config or settings
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    if not config.app_secret:
        results["errors"].append("QANDA_APP_SECRET is not configured; sessions cannot be issued")
        results["valid"] = False
    elif len(config.app_secret) < MIN_SECRET_LENGTH:
        results["warnings"].append(
            f"QANDA_APP_SECRET is shorter than {MIN_SECRET_LENGTH} characters"
        )

    if config.is_production and not config.session_cookie_secure:
        results["warnings"].append("Session cookie is not marked Secure in production")

    for error in results["errors"]:
        logger.error(error)
    for warning in results["warnings"]:
        logger.warning(warning)

    return results


def validate_mail_configuration(config: Settings | None = None) -> dict[str, Any]:
    """Validate that the selected mail provider can be constructed."""
    from .mail import get_mail_transport

    config = config or settings
    results: dict[str, Any] = {"valid": True, "warnings": [], "errors": []}

    try:
        get_mail_transport(config)
    except ValueError as e:
        results["errors"].append(str(e))
        results["valid"] = False
        logger.error("Mail validation failed", error=str(e))
        return results

    if config.mail_provider == "console" and config.is_production:
        results["warnings"].append(
            "Console mail transport in production - reset emails will not be delivered"
        )

    return results


async def validate_startup_configuration() -> dict[str, Any]:
    """Run all startup checks and combine their results."""
    logger.info("Starting application configuration validation")

    db_results = await validate_database_connection()
    auth_results = validate_auth_configuration()
    mail_results = validate_mail_configuration()

    combined_results = {
        "overall_valid": db_results["valid"] and auth_results["valid"] and mail_results["valid"],
        "database": db_results,
        "auth": auth_results,
        "mail": mail_results,
        "environment": {
            "environment": settings.environment,
            "debug": settings.debug,
            "mail_provider": settings.mail_provider,
        },
    }

    if combined_results["overall_valid"]:
        logger.info("Application configuration validation completed successfully")
    else:
        logger.error(
            "Application configuration validation failed",
            database_errors=db_results["errors"],
            auth_errors=auth_results["errors"],
            mail_errors=mail_results["errors"],
        )

    return combined_results
