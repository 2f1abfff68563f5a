# services/units.py

from typing import List, Optional

from core.errors import NotFoundError
from core.logging_config import get_logger
from core.supabase_client import get_supabase_client
from core.utils import utcnow_iso

log = get_logger("units")


LIST_SELECT = """
    *,
    leases(
        id,
        status,
        start_date,
        end_date,
        rent_amount,
        tenant:users!tenant_id(id, full_name)
    )
"""

# property.owner_id is what the gate checks for unit writes
DETAIL_SELECT = """
    *,
    property:properties(id, name, owner_id),
    leases(
        id,
        status,
        start_date,
        end_date,
        rent_amount,
        tenant:users!tenant_id(id, full_name)
    )
"""


def list_property_units(property_id: str) -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("units")
        .select(LIST_SELECT)
        .eq("property_id", property_id)
        .order("unit_number")
        .execute()
    )
    return res.data or []


def get_unit(unit_id: str) -> dict:
    client = get_supabase_client()
    res = (
        client.table("units")
        .select(DETAIL_SELECT)
        .eq("id", unit_id)
        .limit(1)
        .execute()
    )
    if not res.data:
        raise NotFoundError("Unit", unit_id)
    return res.data[0]


def create_unit(property_id: str, data: dict) -> dict:
    now = utcnow_iso()
    row = {**data, "property_id": property_id, "created_at": now, "updated_at": now}

    client = get_supabase_client()
    res = client.table("units").insert(row).execute()
    created = res.data[0] if res.data else row
    log.info(f"Created unit {created.get('unit_number')} on property {property_id}")
    return created


def update_unit(unit_id: str, data: dict) -> Optional[dict]:
    data = {k: v for k, v in data.items() if k not in ("id", "property_id")}

    client = get_supabase_client()
    res = (
        client.table("units")
        .update({**data, "updated_at": utcnow_iso()})
        .eq("id", unit_id)
        .execute()
    )
    return res.data[0] if res.data else None


def delete_unit(unit_id: str) -> bool:
    client = get_supabase_client()
    res = client.table("units").delete().eq("id", unit_id).execute()
    return bool(res.data)
