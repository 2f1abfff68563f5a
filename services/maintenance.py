# services/maintenance.py

from typing import List, Optional

from core.errors import NotFoundError
from core.logging_config import get_logger
from core.supabase_client import get_supabase_client
from core.utils import utcnow_iso
from models.enums import MaintenanceStatus

log = get_logger("maintenance")


REQUEST_COLUMNS = """
    id,
    tenant_id,
    unit_id,
    title,
    description,
    priority,
    status,
    request_date,
    scheduled_date,
    completed_date,
    created_at,
    updated_at
"""

UNIT_EMBED = """
    unit:units(
        id,
        unit_number,
        property:properties(id, name, address)
    )
"""

ADMIN_SELECT = f"{REQUEST_COLUMNS}, tenant:users!tenant_id(id, full_name, email), {UNIT_EMBED}"
TENANT_SELECT = f"{REQUEST_COLUMNS}, {UNIT_EMBED}"
RECENT_SELECT = "id, unit_id, title, description, status, created_at, unit:units(id, unit_number)"

SUBMITTED_MESSAGE = "Request submitted and pending review."

STATUS_MESSAGES = {
    MaintenanceStatus.scheduled.value: "Maintenance visit scheduled.",
    MaintenanceStatus.in_progress.value: "Work on this request has started.",
    MaintenanceStatus.completed.value: "Request completed.",
    MaintenanceStatus.cancelled.value: "Request cancelled.",
}

# Allowed moves; completed and cancelled are terminal.
# Re-posting a live status appends a log entry (e.g. a reschedule).
ALLOWED_TRANSITIONS = {
    MaintenanceStatus.submitted.value: {
        MaintenanceStatus.submitted.value,
        MaintenanceStatus.scheduled.value,
        MaintenanceStatus.in_progress.value,
        MaintenanceStatus.completed.value,
        MaintenanceStatus.cancelled.value,
    },
    MaintenanceStatus.scheduled.value: {
        MaintenanceStatus.scheduled.value,
        MaintenanceStatus.in_progress.value,
        MaintenanceStatus.completed.value,
        MaintenanceStatus.cancelled.value,
    },
    MaintenanceStatus.in_progress.value: {
        MaintenanceStatus.in_progress.value,
        MaintenanceStatus.completed.value,
        MaintenanceStatus.cancelled.value,
    },
    MaintenanceStatus.completed.value: set(),
    MaintenanceStatus.cancelled.value: set(),
}


class InvalidTransitionError(ValueError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move a {current} request to {requested}")


def check_transition(current: Optional[str], requested: str) -> None:
    current = current or MaintenanceStatus.submitted.value
    if requested not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(current, requested)


# ============================================================
# Reads
# ============================================================
def list_all_requests(limit: Optional[int] = None) -> List[dict]:
    client = get_supabase_client()
    query = (
        client.table("maintenance_requests")
        .select(ADMIN_SELECT)
        .order("created_at", desc=True)
    )
    if limit:
        query = query.limit(limit)
    return query.execute().data or []


def list_recent_requests(limit: int = 3) -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("maintenance_requests")
        .select(RECENT_SELECT)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []


def list_tenant_requests(tenant_id: str, limit: Optional[int] = None) -> List[dict]:
    client = get_supabase_client()
    query = (
        client.table("maintenance_requests")
        .select(TENANT_SELECT)
        .eq("tenant_id", tenant_id)
        .order("created_at", desc=True)
    )
    if limit:
        query = query.limit(limit)
    return query.execute().data or []


def get_request(request_id: str) -> dict:
    client = get_supabase_client()
    res = (
        client.table("maintenance_requests")
        .select(REQUEST_COLUMNS)
        .eq("id", request_id)
        .limit(1)
        .execute()
    )
    if not res.data:
        raise NotFoundError("Maintenance request", request_id)
    return res.data[0]


def list_request_updates(request_id: str) -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("maintenance_updates")
        .select("id, request_id, message, status, created_by, created_at")
        .eq("request_id", request_id)
        .order("created_at")
        .execute()
    )
    return res.data or []


# ============================================================
# Writes
# ============================================================
def add_update(request_id: str, actor_id: str, message: str, status: Optional[str] = None) -> Optional[dict]:
    """
    Append to a request's update log.
    Returns None (and logs) on failure; callers never roll back the
    request write that preceded it.
    """
    row = {
        "request_id": request_id,
        "message": message,
        "status": status,
        "created_by": actor_id,
        "created_at": utcnow_iso(),
    }
    try:
        client = get_supabase_client()
        res = client.table("maintenance_updates").insert(row).execute()
        return res.data[0] if res.data else row
    except Exception as e:
        log.error(f"Request {request_id} saved without update log entry: {e}")
        return None


def create_request(
    tenant_id: str,
    unit_id: str,
    title: str,
    description: str,
    priority: str,
) -> dict:
    """
    Two writes, not atomic: the request, then its first log entry.
    If the second write fails the request is kept without a log entry.
    """
    now = utcnow_iso()
    row = {
        "tenant_id": tenant_id,
        "unit_id": unit_id,
        "title": title,
        "description": description,
        "priority": priority,
        "status": MaintenanceStatus.submitted.value,
        "request_date": now,
        "created_at": now,
        "updated_at": now,
    }

    client = get_supabase_client()
    res = client.table("maintenance_requests").insert(row).execute()
    created = res.data[0] if res.data else row

    log.info(f"Tenant {tenant_id} opened maintenance request {created.get('id')} on unit {unit_id}")

    if created.get("id"):
        add_update(created["id"], tenant_id, SUBMITTED_MESSAGE, MaintenanceStatus.submitted.value)

    return created


def update_request_status(
    request_id: str,
    status: str,
    actor_id: str,
    message: Optional[str] = None,
    scheduled_date: Optional[str] = None,
) -> Optional[dict]:
    """
    Move a request along its workflow. Raises NotFoundError for an
    unknown id and InvalidTransitionError for a move the workflow forbids.
    """
    current = get_request(request_id)
    check_transition(current.get("status"), status)

    now = utcnow_iso()
    fields = {"status": status, "updated_at": now}

    if status == MaintenanceStatus.scheduled.value:
        fields["scheduled_date"] = scheduled_date or now
    elif status == MaintenanceStatus.completed.value:
        fields["completed_date"] = now

    client = get_supabase_client()
    res = (
        client.table("maintenance_requests")
        .update(fields)
        .eq("id", request_id)
        .execute()
    )
    if not res.data:
        return None

    add_update(request_id, actor_id, message or STATUS_MESSAGES.get(status, f"Status changed to {status}."), status)
    return res.data[0]
