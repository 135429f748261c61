"""
Startup Security Validation.

Checks security invariants before the application accepts traffic. If any
check fails, the application refuses to start with a clear error message.

Called during FastAPI lifespan initialization.
"""

from keepnotes.backend.core.config import AppConfig, Settings
from keepnotes.backend.core.logging import get_logger

logger = get_logger(__name__)

LOCAL_HOSTS = ("localhost", "127.0.0.1")


class StartupCheckError(RuntimeError):
    """Raised when a startup security check fails."""


def run_startup_checks(settings: Settings, app_config: AppConfig) -> None:
    """
    Validate all security invariants at startup.

    Raises:
        StartupCheckError: If any check fails
    """
    environment = app_config.application.environment
    errors: list[str] = []

    _check_secret_strength(settings, app_config, errors)
    _check_production_safety(app_config, environment == "production", errors)

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupCheckError(
            f"Startup blocked, {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info("Startup security checks passed", extra={"environment": environment})


def _check_secret_strength(settings: Settings, app_config: AppConfig, errors: list[str]) -> None:
    """Validate that secrets meet minimum length requirements."""
    jwt_min = app_config.security.secrets_validation.jwt_secret_min_length
    if len(settings.jwt_secret) < jwt_min:
        errors.append(
            f"JWT_SECRET is {len(settings.jwt_secret)} chars, minimum is {jwt_min}"
        )


def _check_production_safety(app_config: AppConfig, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if app.docs_enabled:
        errors.append("docs_enabled is true in production environment")

    local_origins = [o for o in app.cors.origins if any(h in o for h in LOCAL_HOSTS)]
    if local_origins:
        errors.append(f"CORS origins contain localhost in production: {local_origins}")
