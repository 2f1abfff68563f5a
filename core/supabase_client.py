# core/supabase_client.py

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

def get_supabase_client() -> Client:
    """
    Creates a Supabase client using the SERVICE ROLE KEY.

    Row-level security is bypassed by this key, so every caller
    must have passed the authorization gate first.
    """
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY

    if not supabase_url or not supabase_key:
        logger.error("Missing Supabase credentials")
        logger.error(f"   URL: {supabase_url}")
        logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
        raise RuntimeError("Supabase client not configured")

    return create_client(supabase_url, supabase_key)


# ============================================================
# Ping Supabase for health checks
# ============================================================

HEALTH_TABLES = ["users", "properties", "units", "payments"]


def ping_supabase() -> dict:
    """
    Simple connectivity check across the core tables.
    """
    try:
        client = get_supabase_client()
    except RuntimeError:
        return {"service": "Supabase", "status": "not_configured"}

    results = {}
    for t in HEALTH_TABLES:
        try:
            res = client.table(t).select("id").limit(1).execute()
            results[t] = {
                "status": "ok",
                "rows_found": len(res.data or []),
            }
        except Exception as err:
            results[t] = {"status": "error", "detail": str(err)}

    overall = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"
    return {
        "service": "Supabase",
        "status": overall,
        "tables": results,
    }
