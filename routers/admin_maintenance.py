# routers/admin_maintenance.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.email_templates import maintenance_update_email
from core.errors import NotFoundError, api_error, handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import requires_permission
from core.permissions import MAINTENANCE_READ_ALL, MAINTENANCE_MANAGE
from core.shaping import shape_maintenance, shape_all
from dependencies.auth import CurrentUser
from models.enums import NotificationType
from models.maintenance import MaintenanceStatusUpdate
from services.maintenance import InvalidTransitionError, list_all_requests, update_request_status
from services.notifications import notify_user
from services.users import get_user_by_id

router = APIRouter(
    prefix="/api/admin/maintenance",
    tags=["Admin Maintenance"],
)


def _notify_tenant(request: dict, message: Optional[str]):
    tenant_id = request.get("tenant_id")
    if not tenant_id:
        return

    tenant = None
    try:
        tenant = get_user_by_id(tenant_id)
    except Exception as e:
        logger.warning(f"Could not load tenant {tenant_id} for maintenance notice: {e}")

    notice = maintenance_update_email(
        request,
        message=message,
        tenant_name=tenant.get("full_name") if tenant else None,
    )
    notify_user(
        tenant_id,
        notice.subject,
        notice.text,
        NotificationType.maintenance.value,
        email=tenant.get("email") if tenant else None,
        html_body=notice.html,
    )


@router.get("", summary="List all maintenance requests")
def list_requests(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    current_user: CurrentUser = Depends(requires_permission(MAINTENANCE_READ_ALL)),
):
    try:
        rows = list_all_requests(limit=limit)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch maintenance requests")

    return shape_all(rows, shape_maintenance)


@router.patch("/{request_id}", summary="Move a request through its workflow")
def update_status(
    request_id: str,
    payload: MaintenanceStatusUpdate,
    current_user: CurrentUser = Depends(requires_permission(MAINTENANCE_MANAGE)),
):
    """
    submitted → scheduled → in_progress → completed (or cancelled).
    Completed and cancelled are final; any other backwards move is a 409.
    Appends an entry to the request's update log and notifies the tenant.
    """
    try:
        updated = update_request_status(
            request_id,
            payload.status.value,
            current_user.id,
            message=payload.message,
            scheduled_date=payload.scheduled_date,
        )
    except NotFoundError:
        raise api_error(404, "Maintenance request not found")
    except InvalidTransitionError as e:
        raise api_error(409, str(e), {"current": e.current, "requested": e.requested})
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update maintenance request")

    if updated is None:
        raise api_error(404, "Maintenance request not found")

    _notify_tenant(updated, payload.message)
    return {"success": True, "data": updated}
