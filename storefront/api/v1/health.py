"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter
from sqlalchemy import text

from storefront.core.deps import AppSettings, DBSession

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: DBSession, settings: AppSettings) -> dict[str, Any]:
    """
    Health check endpoint.

    Checks database connectivity and returns service status.
    """
    health_status: dict[str, Any] = {
        "status": "healthy",
        "version": settings.version,
        "environment": settings.environment,
        "checks": {},
    }

    try:
        await db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"

    return health_status


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness probe for container orchestration.

    Simple check that the service is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(db: DBSession) -> dict[str, str]:
    """
    Readiness probe for container orchestration.

    Checks if the database accepts queries.
    """
    await db.execute(text("SELECT 1"))

    return {"status": "ready"}
