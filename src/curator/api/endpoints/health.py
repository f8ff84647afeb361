"""Health check endpoints."""

from fastapi import APIRouter
from sqlalchemy import text

from curator.core.config import get_settings
from curator.database.connection import SessionLocal

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": get_settings().service_name}


@router.get("/ready")
async def ready() -> dict:
    """Readiness check - verifies the registry database is reachable."""
    checks: dict[str, str] = {}
    try:
        with SessionLocal() as session:
            session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {type(e).__name__}"

    status = "ready" if all(v == "ok" for v in checks.values()) else "not_ready"
    return {"status": status, "checks": checks}
