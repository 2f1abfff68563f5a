# routers/admin_dashboard.py

from fastapi import APIRouter, Depends

from core.errors import handle_supabase_error
from core.permission_helpers import requires_permission
from core.permissions import DASHBOARD_READ
from core.shaping import shape_payment_summary, shape_maintenance, shape_all
from dependencies.auth import CurrentUser
from models.property import PropertyStats
from services.maintenance import list_recent_requests
from services.payments import list_recent_payments
from services.properties import property_stats

router = APIRouter(
    prefix="/api/admin/dashboard",
    tags=["Admin Dashboard"],
)

RECENT_LIMIT = 3


@router.get("/payments", summary="Most recent payments")
def recent_payments(current_user: CurrentUser = Depends(requires_permission(DASHBOARD_READ))):
    try:
        rows = list_recent_payments(limit=RECENT_LIMIT)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch recent payments")

    return shape_all(rows, shape_payment_summary)


@router.get("/maintenance", summary="Most recent maintenance requests")
def recent_maintenance(current_user: CurrentUser = Depends(requires_permission(DASHBOARD_READ))):
    try:
        rows = list_recent_requests(limit=RECENT_LIMIT)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch maintenance requests")

    return shape_all(rows, shape_maintenance)


@router.get("/stats", response_model=PropertyStats, summary="Portfolio statistics for the caller's properties")
def stats(current_user: CurrentUser = Depends(requires_permission(DASHBOARD_READ))):
    try:
        return property_stats(current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch property stats")
