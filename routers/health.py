# routers/health.py

"""
Liveness and dependency checks for the permission manager.

/health/app answers as long as the process is up. /health/db reads one
row from each permission table, so a misconfigured service key or a
missing migration shows up as "degraded" before an operator opens an
editor and gets a 502.
"""

from fastapi import APIRouter
from core.logging_config import logger
from core.supabase_client import PERMISSION_TABLES, ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get("/db", summary="Permission tables health check")
async def health_db():
    """Per-table status for roles, permissions and role_permissions."""
    try:
        status = ping_supabase()
    except Exception as e:
        logger.error(f"Permission store health check failed: {e}")
        return {
            "service": "Supabase",
            "status": "error",
            "error": str(e),
        }

    if status.get("status") != "ok":
        logger.warning(f"Permission store health: {status.get('status')}")

    return {
        "service": "Supabase",
        "status": status.get("status", "unknown"),
        "tables": PERMISSION_TABLES,
        "details": status,
    }


@router.get("/app", summary="App health check")
async def health_app():
    return {
        "service": "Role Permission Manager API",
        "status": "ok",
    }
