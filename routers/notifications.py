# routers/notifications.py

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from core.errors import api_error, handle_supabase_error, NotProvisionedError
from core.permission_helpers import requires_permission
from core.permissions import NOTIFICATIONS_READ_OWN
from dependencies.auth import CurrentUser
from models.notification import NotificationMarkRead
from services.notifications import list_user_notifications, mark_read

router = APIRouter(
    prefix="/api/notifications",
    tags=["Notifications"],
)

NOT_PROVISIONED = "Notifications are not yet provisioned"


@router.get("", summary="Paginated notifications for the caller")
def list_notifications(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(requires_permission(NOTIFICATIONS_READ_OWN)),
):
    try:
        rows, total = list_user_notifications(current_user.id, limit=limit, offset=offset)
    except NotProvisionedError:
        raise api_error(503, NOT_PROVISIONED)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch notifications")

    return {
        "success": True,
        "data": rows,
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": offset + len(rows) < total,
        },
    }


@router.patch("", summary="Mark a notification read or unread")
def update_notification(
    payload: Optional[NotificationMarkRead] = Body(None),
    current_user: CurrentUser = Depends(requires_permission(NOTIFICATIONS_READ_OWN)),
):
    if payload is None or not payload.notification_id:
        raise api_error(400, "Missing notificationId parameter")

    try:
        updated = mark_read(payload.notification_id, current_user.id, is_read=payload.read)
    except NotProvisionedError:
        raise api_error(503, NOT_PROVISIONED)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update notification")

    if updated is None:
        raise api_error(404, "Notification not found")

    return {"success": True, "data": updated}
