# routers/tenant.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from core.errors import api_error, handle_supabase_error, NotProvisionedError
from core.permission_helpers import require, requires_permission
from core.permissions import (
    MAINTENANCE_READ_OWN,
    MAINTENANCE_CREATE,
    NOTIFICATIONS_READ_OWN,
    LEASE_READ_OWN,
)
from core.shaping import shape_maintenance, shape_lease, shape_all
from dependencies.auth import CurrentUser
from models.maintenance import MaintenanceRequestCreate
from services.leases import get_active_lease
from services.maintenance import (
    list_tenant_requests,
    create_request,
    get_request,
    list_request_updates,
)
from services.notifications import list_user_notifications

router = APIRouter(
    prefix="/api/tenant",
    tags=["Tenant"],
)

NOTIFICATIONS_NOT_PROVISIONED = "Notifications are not yet provisioned"


# ============================================================
# MAINTENANCE
# ============================================================
@router.get("/maintenance", summary="The caller's maintenance requests")
def my_requests(
    limit: Optional[int] = Query(None, ge=1, le=500),
    current_user: CurrentUser = Depends(requires_permission(MAINTENANCE_READ_OWN)),
):
    # Scoped to the caller regardless of role; the admin-wide view is /api/admin/maintenance
    try:
        rows = list_tenant_requests(current_user.id, limit=limit)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch maintenance requests")

    return shape_all(rows, shape_maintenance)


@router.post(
    "/maintenance",
    status_code=status.HTTP_201_CREATED,
    summary="Open a maintenance request",
)
def open_request(
    payload: MaintenanceRequestCreate,
    current_user: CurrentUser = Depends(requires_permission(MAINTENANCE_CREATE)),
):
    """
    The unit defaults to the one on the caller's active lease.
    A tenant may only file against the unit they lease.
    """
    try:
        lease = get_active_lease(current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch lease")

    if not lease:
        raise api_error(400, "No active lease found")

    unit_id = payload.unit_id or lease.get("unit_id")
    if str(unit_id) != str(lease.get("unit_id")):
        raise api_error(403, "You can only submit requests for your own unit")

    try:
        created = create_request(
            tenant_id=current_user.id,
            unit_id=unit_id,
            title=payload.title.strip(),
            description=payload.description.strip(),
            priority=payload.priority.value,
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create maintenance request")

    return {"success": True, "data": created}


@router.get("/maintenance/{request_id}/updates", summary="Update log for one request")
def request_updates(
    request_id: str,
    current_user: CurrentUser = Depends(requires_permission(MAINTENANCE_READ_OWN)),
):
    try:
        request_row = get_request(request_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch maintenance request")

    require(current_user, MAINTENANCE_READ_OWN, tenant_id=request_row.get("tenant_id"))

    try:
        return list_request_updates(request_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch maintenance updates")


# ============================================================
# NOTIFICATIONS
# ============================================================
@router.get("/notifications", summary="The caller's notifications")
def my_notifications(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: CurrentUser = Depends(requires_permission(NOTIFICATIONS_READ_OWN)),
):
    try:
        rows, _ = list_user_notifications(current_user.id, limit=limit)
    except NotProvisionedError:
        raise api_error(503, NOTIFICATIONS_NOT_PROVISIONED)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch notifications")

    return rows


# ============================================================
# LEASE
# ============================================================
@router.get("/lease", summary="The caller's active lease")
def my_lease(current_user: CurrentUser = Depends(requires_permission(LEASE_READ_OWN))):
    try:
        lease = get_active_lease(current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch lease")

    if not lease:
        raise api_error(404, "No active lease found")

    return shape_lease(lease)
