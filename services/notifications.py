# services/notifications.py

from typing import List, Optional, Tuple

from postgrest.exceptions import APIError

from core.errors import NotProvisionedError, is_missing_relation_error
from core.logging_config import get_logger
from core.notifications import send_email
from core.supabase_client import get_supabase_client
from core.utils import utcnow_iso

log = get_logger("notifications")

NOTIFICATION_COLUMNS = "id, user_id, title, content, notification_type, is_read, created_at"


def _raise_if_unprovisioned(error: APIError):
    if is_missing_relation_error(error):
        raise NotProvisionedError("notifications") from error
    raise error


def list_user_notifications(
    user_id: str,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[List[dict], int]:
    client = get_supabase_client()
    query = (
        client.table("notifications")
        .select(NOTIFICATION_COLUMNS, count="exact")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
    )
    if limit:
        query = query.range(offset, offset + limit - 1)

    try:
        res = query.execute()
    except APIError as e:
        _raise_if_unprovisioned(e)

    rows = res.data or []
    total = res.count if res.count is not None else len(rows)
    return rows, total


def mark_read(notification_id: str, user_id: str, is_read: bool = True) -> Optional[dict]:
    """Scoped by user_id so callers can only flag their own rows."""
    client = get_supabase_client()
    try:
        res = (
            client.table("notifications")
            .update({"is_read": is_read})
            .eq("id", notification_id)
            .eq("user_id", user_id)
            .execute()
        )
    except APIError as e:
        _raise_if_unprovisioned(e)
    return res.data[0] if res.data else None


def create_notification(user_id: str, title: str, content: str, notification_type: str) -> dict:
    row = {
        "user_id": user_id,
        "title": title,
        "content": content,
        "notification_type": notification_type,
        "is_read": False,
        "created_at": utcnow_iso(),
    }
    client = get_supabase_client()
    try:
        res = client.table("notifications").insert(row).execute()
    except APIError as e:
        _raise_if_unprovisioned(e)
    return res.data[0] if res.data else row


def notify_user(
    user_id: Optional[str],
    title: str,
    content: str,
    notification_type: str,
    email: Optional[str] = None,
    html_body: Optional[str] = None,
) -> bool:
    """
    Side-effect notification after a successful mutation.
    `content` is the in-app text and the plain-text email part.
    Failures are logged; the mutation that triggered it stands.
    """
    if not user_id:
        return False

    delivered = True
    try:
        create_notification(user_id, title, content, notification_type)
    except Exception as e:
        log.warning(f"Could not store notification for {user_id}: {e}")
        delivered = False

    if email:
        try:
            send_email(subject=title, body=content, recipients=[email], html_body=html_body)
        except Exception as e:
            log.warning(f"Email notification to {user_id} failed: {e}")

    return delivered
