# services/users.py

from typing import List, Optional

from core.errors import NotFoundError
from core.supabase_client import get_supabase_client
from core.logging_config import get_logger
from core.utils import utcnow_iso
from models.enums import UserType

log = get_logger("users")

USER_COLUMNS = "id, clerk_id, email, full_name, phone_number, user_type"


# ============================================================
# Lookups
# ============================================================
def get_user_by_clerk_id(clerk_id: str) -> Optional[dict]:
    """
    Resolve a Clerk subject to its users row.
    users.clerk_id is the single linkage column; None means the
    subject has not selected a role yet.
    """
    client = get_supabase_client()
    res = (
        client.table("users")
        .select(USER_COLUMNS)
        .eq("clerk_id", clerk_id)
        .limit(1)
        .execute()
    )
    return res.data[0] if res.data else None


def get_user_by_id(user_id: str) -> Optional[dict]:
    client = get_supabase_client()
    res = (
        client.table("users")
        .select(USER_COLUMNS)
        .eq("id", user_id)
        .limit(1)
        .execute()
    )
    return res.data[0] if res.data else None


# ============================================================
# Writes
# ============================================================
def create_user(row: dict) -> dict:
    """
    Insert a users row. The internal id is the Clerk id, so both
    linkage strategies (id and clerk_id) agree for new rows.
    """
    clerk_id = row["clerk_id"]
    now = utcnow_iso()
    payload = {
        "id": clerk_id,
        "user_type": UserType.tenant.value,
        "created_at": now,
        "updated_at": now,
        **row,
    }

    client = get_supabase_client()
    res = client.table("users").insert(payload).execute()
    log.info(f"Created users row for {clerk_id} as {payload['user_type']}")
    return res.data[0] if res.data else payload


def update_user_by_clerk_id(clerk_id: str, fields: dict) -> Optional[dict]:
    """
    Single-row update with updated_at stamping (fields may carry their
    own updated_at, e.g. the event time of a replayed webhook).
    Returns the updated row, or None when no row matched.
    """
    client = get_supabase_client()
    res = (
        client.table("users")
        .update({"updated_at": utcnow_iso(), **fields})
        .eq("clerk_id", clerk_id)
        .execute()
    )
    return res.data[0] if res.data else None


def set_user_role(clerk_id: str, role: str) -> dict:
    """
    Role selection: update the existing row, or create one with
    placeholder contact fields that the next user.updated event fills in.
    """
    existing = get_user_by_clerk_id(clerk_id)

    if existing:
        updated = update_user_by_clerk_id(clerk_id, {"user_type": role})
        log.info(f"User {clerk_id} selected role {role}")
        return updated or {**existing, "user_type": role}

    return create_user({
        "clerk_id": clerk_id,
        "user_type": role,
        "full_name": "New User",
    })


# ============================================================
# Tenant directory
# ============================================================
TENANT_COLUMNS = "id, clerk_id, email, full_name, phone_number, created_at"

TENANT_DETAIL_SELECT = f"""
    {TENANT_COLUMNS},
    leases!tenant_id(
        id,
        status,
        start_date,
        end_date,
        rent_amount,
        unit:units(
            id,
            unit_number,
            property:properties(id, name, address)
        )
    )
"""


def list_tenants() -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("users")
        .select(TENANT_COLUMNS)
        .eq("user_type", UserType.tenant.value)
        .order("full_name")
        .execute()
    )
    return res.data or []


def get_tenant(tenant_id: str) -> dict:
    client = get_supabase_client()
    res = (
        client.table("users")
        .select(TENANT_DETAIL_SELECT)
        .eq("id", tenant_id)
        .eq("user_type", UserType.tenant.value)
        .limit(1)
        .execute()
    )
    if not res.data:
        raise NotFoundError("Tenant", tenant_id)
    return res.data[0]


def create_tenant(data: dict) -> dict:
    now = utcnow_iso()
    row = {**data, "user_type": UserType.tenant.value, "created_at": now, "updated_at": now}

    client = get_supabase_client()
    res = client.table("users").insert(row).execute()
    created = res.data[0] if res.data else row
    log.info(f"Added tenant {created.get('id')} to the directory")
    return created


def update_tenant(tenant_id: str, data: dict) -> Optional[dict]:
    """Contact fields only; the row must still be a tenant."""
    data = {k: v for k, v in data.items() if k not in ("id", "clerk_id", "user_type")}

    client = get_supabase_client()
    res = (
        client.table("users")
        .update({**data, "updated_at": utcnow_iso()})
        .eq("id", tenant_id)
        .eq("user_type", UserType.tenant.value)
        .execute()
    )
    return res.data[0] if res.data else None
