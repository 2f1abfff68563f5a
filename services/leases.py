# services/leases.py

from typing import List, Optional

from core.errors import NotFoundError
from core.logging_config import get_logger
from core.supabase_client import get_supabase_client
from core.utils import utcnow_iso
from models.enums import LeaseStatus, UnitStatus

log = get_logger("leases")


ACTIVE_LEASE_SELECT = """
    *,
    unit:units(
        id,
        unit_number,
        property:properties(id, name, address)
    )
"""

# !inner lets the list filter on the owning landlord through the embeds
OWNER_LIST_SELECT = """
    *,
    tenant:users!tenant_id(id, full_name, email),
    unit:units!inner(
        id,
        unit_number,
        property:properties!inner(id, name, address, owner_id)
    )
"""

# unit.property.owner_id is what the gate checks
DETAIL_SELECT = """
    *,
    tenant:users!tenant_id(id, full_name, email),
    unit:units(
        id,
        unit_number,
        property:properties(id, name, address, owner_id)
    ),
    payments(id, amount, payment_date, payment_method, reference, status, created_at)
"""

# Unit status that follows a lease status change; ending a lease frees the unit
UNIT_STATUS_FOR_LEASE = {
    LeaseStatus.active.value: UnitStatus.occupied.value,
    LeaseStatus.expired.value: UnitStatus.vacant.value,
    LeaseStatus.terminated.value: UnitStatus.vacant.value,
}


# ============================================================
# Reads
# ============================================================
def get_lease(lease_id: str) -> dict:
    """Bare lease row; tenant_id is what the gate checks."""
    client = get_supabase_client()
    res = (
        client.table("leases")
        .select("id, tenant_id, unit_id, status, rent_amount")
        .eq("id", lease_id)
        .limit(1)
        .execute()
    )
    if not res.data:
        raise NotFoundError("Lease", lease_id)
    return res.data[0]


def get_active_lease(tenant_id: str) -> Optional[dict]:
    client = get_supabase_client()
    res = (
        client.table("leases")
        .select(ACTIVE_LEASE_SELECT)
        .eq("tenant_id", tenant_id)
        .eq("status", LeaseStatus.active.value)
        .order("start_date", desc=True)
        .limit(1)
        .execute()
    )
    return res.data[0] if res.data else None


def list_owner_leases(owner_id: str, status: Optional[str] = None) -> List[dict]:
    """Leases on units of properties owned by `owner_id`, newest first."""
    client = get_supabase_client()
    query = (
        client.table("leases")
        .select(OWNER_LIST_SELECT)
        .eq("unit.property.owner_id", owner_id)
    )
    if status:
        query = query.eq("status", status)
    return query.order("start_date", desc=True).execute().data or []


def get_lease_detail(lease_id: str) -> dict:
    client = get_supabase_client()
    res = (
        client.table("leases")
        .select(DETAIL_SELECT)
        .eq("id", lease_id)
        .limit(1)
        .execute()
    )
    if not res.data:
        raise NotFoundError("Lease", lease_id)
    return res.data[0]


def unit_has_active_lease(unit_id: str) -> bool:
    client = get_supabase_client()
    res = (
        client.table("leases")
        .select("id")
        .eq("unit_id", unit_id)
        .eq("status", LeaseStatus.active.value)
        .limit(1)
        .execute()
    )
    return bool(res.data)


# ============================================================
# Writes
# ============================================================
def _set_unit_status(unit_id: str, status: str) -> None:
    client = get_supabase_client()
    (
        client.table("units")
        .update({"status": status, "updated_at": utcnow_iso()})
        .eq("id", unit_id)
        .execute()
    )


def create_lease(data: dict) -> dict:
    """
    Insert the lease, then mark its unit occupied when the lease is active.
    Two writes, not atomic; a failed unit update is logged and the lease kept.
    """
    now = utcnow_iso()
    row = {**data, "created_at": now, "updated_at": now}

    client = get_supabase_client()
    res = client.table("leases").insert(row).execute()
    created = res.data[0] if res.data else row

    log.info(f"Lease {created.get('id')} created for tenant {data['tenant_id']} on unit {data['unit_id']}")

    if data.get("status") == LeaseStatus.active.value:
        try:
            _set_unit_status(data["unit_id"], UnitStatus.occupied.value)
        except Exception as e:
            log.error(f"Lease {created.get('id')} saved but unit {data['unit_id']} not marked occupied: {e}")

    return created


def update_lease(lease_id: str, unit_id: Optional[str], data: dict) -> Optional[dict]:
    data = {k: v for k, v in data.items() if k not in ("id", "tenant_id", "unit_id")}

    client = get_supabase_client()
    res = (
        client.table("leases")
        .update({**data, "updated_at": utcnow_iso()})
        .eq("id", lease_id)
        .execute()
    )
    if not res.data:
        return None

    new_status = data.get("status")
    if unit_id and new_status in UNIT_STATUS_FOR_LEASE:
        unit_status = UNIT_STATUS_FOR_LEASE[new_status]
        try:
            _set_unit_status(unit_id, unit_status)
        except Exception as e:
            log.error(f"Lease {lease_id} is {new_status} but unit {unit_id} not marked {unit_status}: {e}")
        else:
            log.info(f"Lease {lease_id} {new_status}; unit {unit_id} is {unit_status}")

    return res.data[0]
