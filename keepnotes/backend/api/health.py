"""
Health Check Endpoints.

Provides liveness and readiness checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from keepnotes.backend.core.dependencies import DbSession
from keepnotes.backend.core.logging import get_logger
from keepnotes.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database(db: DbSession) -> dict[str, Any]:
    """
    Check database connectivity with a round-trip query.

    Returns:
        Dict with status, latency, and optional error message
    """
    start = utc_now()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": type(e).__name__}

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {"status": "healthy", "latency_ms": latency_ms}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(db: DbSession) -> JSONResponse:
    """
    Readiness check.

    Returns 200 if the database answers, 503 otherwise.
    """
    database = await check_database(db)
    healthy = database["status"] == "healthy"

    if not healthy:
        logger.warning("Readiness check failed", extra={"database": database})

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "checks": {"database": database},
            "timestamp": utc_now().isoformat(),
        },
    )
