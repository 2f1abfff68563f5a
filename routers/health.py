# routers/health.py

from fastapi import APIRouter

from core.config import settings
from core.supabase_client import ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Supabase table reachability")
def health_db():
    """
    Queries each core table once (users, properties, units, payments).
    status is ok / degraded / not_configured, with per-table results.
    """
    try:
        result = ping_supabase()
    except Exception as e:
        return {
            "service": "Supabase",
            "status": "error",
            "error": str(e),
        }

    return {
        "service": "Supabase",
        "status": result.get("status", "unknown"),
        "details": result,
    }


# -----------------------------------------------------
# GET /health/app
# -----------------------------------------------------
@router.get("/app", summary="App health check")
def health_app():
    return {
        "service": settings.PROJECT_NAME,
        "env": settings.ENV,
        "status": "ok",
    }
