"""
Health Endpoints

Liveness, readiness and service info for the load balancer.
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection

from wattleos.config import settings
from wattleos.core.database import engine
from wattleos.core.models import Base

SERVICE_NAME = "WattleOS Pedagogy"
SERVICE_VERSION = "0.1.0"

router = APIRouter(tags=["Health"])


def _missing_tables(conn: Connection) -> list[str]:
    inspector = inspect(conn)
    return sorted(name for name in Base.metadata.tables if not inspector.has_table(name))


async def check_database() -> dict[str, Any]:
    """Round-trip a trivial query."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy"}


async def check_schema() -> dict[str, Any]:
    """Every table the models map must exist (migrations applied)."""
    try:
        async with engine.connect() as conn:
            missing = await conn.run_sync(_missing_tables)
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    if missing:
        return {"status": "unhealthy", "missing_tables": missing}
    return {"status": "healthy"}


def _all_healthy(checks: dict[str, dict[str, Any]]) -> bool:
    return all(check["status"] == "healthy" for check in checks.values())


@router.get("/")
async def root() -> dict[str, str]:
    return {
        "service": SERVICE_NAME,
        "status": "operational",
        "version": SERVICE_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/health", response_model=None)
async def health_check() -> JSONResponse:
    """Database connectivity, for load balancers."""
    checks = {"database": await check_database()}
    healthy = _all_healthy(checks)

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "environment": settings.ENVIRONMENT,
            "checks": checks,
        },
    )


@router.get("/health/ready", response_model=None)
async def readiness_check() -> JSONResponse:
    """Ready once the database answers and the pedagogy tables exist."""
    checks = {"database": await check_database()}
    if checks["database"]["status"] == "healthy":
        checks["schema"] = await check_schema()
    else:
        checks["schema"] = {"status": "unknown"}
    ready = _all_healthy(checks)

    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "not_ready", "checks": checks},
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Process is up; says nothing about the database."""
    return {"status": "alive"}
