# services/properties.py

from typing import List, Optional

from core.errors import NotFoundError
from core.logging_config import get_logger
from core.supabase_client import get_supabase_client
from core.utils import utcnow_iso
from models.enums import UnitStatus

log = get_logger("properties")


LIST_SELECT = "*, units(count)"

DETAIL_SELECT = """
    *,
    units(
        id,
        unit_number,
        floor_number,
        bedrooms,
        bathrooms,
        square_feet,
        rent_amount,
        status,
        amenities
    )
"""

STATS_SELECT = "id, units(status, rent_amount)"


# ============================================================
# Reads
# ============================================================
def list_owner_properties(owner_id: str) -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("properties")
        .select(LIST_SELECT)
        .eq("owner_id", owner_id)
        .order("created_at", desc=True)
        .execute()
    )
    return res.data or []


def get_property(property_id: str) -> dict:
    """
    Unscoped fetch; the caller checks owner_id through the gate.
    """
    client = get_supabase_client()
    res = (
        client.table("properties")
        .select(DETAIL_SELECT)
        .eq("id", property_id)
        .limit(1)
        .execute()
    )
    if not res.data:
        raise NotFoundError("Property", property_id)
    return res.data[0]


def property_stats(owner_id: str) -> dict:
    client = get_supabase_client()
    res = (
        client.table("properties")
        .select(STATS_SELECT)
        .eq("owner_id", owner_id)
        .execute()
    )
    return summarize_properties(res.data or [])


def summarize_properties(properties: List[dict]) -> dict:
    stats = {
        "total_properties": len(properties),
        "total_units": 0,
        "occupied_units": 0,
        "vacant_units": 0,
        "total_potential_revenue": 0.0,
        "actual_revenue": 0.0,
    }

    for prop in properties:
        for unit in prop.get("units") or []:
            rent = float(unit.get("rent_amount") or 0)
            stats["total_units"] += 1
            stats["total_potential_revenue"] += rent

            if unit.get("status") == UnitStatus.occupied.value:
                stats["occupied_units"] += 1
                stats["actual_revenue"] += rent
            elif unit.get("status") == UnitStatus.vacant.value:
                stats["vacant_units"] += 1

    total = stats["total_units"]
    stats["occupancy_rate"] = round(stats["occupied_units"] * 100.0 / total, 1) if total else 0.0
    return stats


# ============================================================
# Writes (always scoped by owner_id as well as id)
# ============================================================
def create_property(owner_id: str, data: dict) -> dict:
    now = utcnow_iso()
    row = {
        **data,
        "owner_id": owner_id,
        "status": "active",
        "created_at": now,
        "updated_at": now,
    }

    client = get_supabase_client()
    res = client.table("properties").insert(row).execute()
    created = res.data[0] if res.data else row
    log.info(f"Owner {owner_id} created property {created.get('id')}")
    return created


def update_property(property_id: str, owner_id: str, data: dict) -> Optional[dict]:
    # owner_id in the payload is ignored; ownership never moves here
    data = {k: v for k, v in data.items() if k not in ("id", "owner_id")}

    client = get_supabase_client()
    res = (
        client.table("properties")
        .update({**data, "updated_at": utcnow_iso()})
        .eq("id", property_id)
        .eq("owner_id", owner_id)
        .execute()
    )
    return res.data[0] if res.data else None


def delete_property(property_id: str, owner_id: str) -> bool:
    client = get_supabase_client()
    res = (
        client.table("properties")
        .delete()
        .eq("id", property_id)
        .eq("owner_id", owner_id)
        .execute()
    )
    deleted = bool(res.data)
    if deleted:
        log.info(f"Owner {owner_id} deleted property {property_id}")
    return deleted
