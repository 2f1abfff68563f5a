# core/shaping.py

"""
Flatten nested PostgREST rows into the flat views the frontend reads.

Every shaper:
  • replaces a broken relation chain with a literal fallback ("Unknown"
    unless the view says otherwise), never None or ""
  • drops the ids the authorization gate used (tenant_id, owner_id,
    landlord_id) unless the view documents them
  • is idempotent: a row that has already been shaped comes back unchanged
"""

from typing import Any, Dict, Iterable, List, Optional

UNKNOWN = "Unknown"


def dig(row: Optional[Dict[str, Any]], *path: str, fallback: Any = UNKNOWN) -> Any:
    """
    Null-safe nested lookup: dig(payment, "lease", "tenant", "full_name").
    Returns `fallback` if any link is missing, None, or the leaf is empty.
    """
    current: Any = row
    for key in path:
        if not isinstance(current, dict):
            return fallback
        current = current.get(key)
        if current is None:
            return fallback

    if current == "":
        return fallback
    return current


def _flat(row: Dict[str, Any], field: str, *path: str, fallback: Any = UNKNOWN) -> Any:
    # Already-flat rows keep their value; the relation is gone
    if path[0] not in row and field in row:
        return row[field]
    return dig(row, *path, fallback=fallback)


def _pick(row: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    return {f: row.get(f) for f in fields if f in row}


def _date_only(value: Any) -> Optional[str]:
    if not value:
        return None
    return str(value)[:10]


# ============================================================
# Payments
# ============================================================
PAYMENT_SUMMARY_FIELDS = ("id", "amount", "payment_date", "status")

PAYMENT_FIELDS = (
    "id", "lease_id", "amount", "payment_date", "payment_method",
    "reference", "status", "verification_date", "rejection_reason",
    "created_at",
)


def shape_payment_summary(row: Dict[str, Any]) -> Dict[str, Any]:
    """Dashboard card: payment → lease → tenant / unit."""
    shaped = _pick(row, PAYMENT_SUMMARY_FIELDS)
    shaped["tenant_name"] = _flat(row, "tenant_name", "lease", "tenant", "full_name")
    shaped["unit_number"] = _flat(row, "unit_number", "lease", "unit", "unit_number")
    return shaped


def shape_admin_payment(row: Dict[str, Any]) -> Dict[str, Any]:
    """Admin payments table row."""
    shaped = _pick(row, PAYMENT_FIELDS)

    # Tenant comes from the lease when the payment row has no direct link
    tenant_path = ("tenant",) if row.get("tenant") else ("lease", "tenant")
    shaped["tenant_name"] = _flat(row, "tenant_name", *tenant_path, "full_name")
    shaped["tenant_email"] = _flat(row, "tenant_email", *tenant_path, "email")
    shaped["unit_number"] = _flat(row, "unit_number", "lease", "unit", "unit_number")
    shaped["property_name"] = _flat(row, "property_name", "lease", "unit", "property", "name")
    return shaped


def shape_tenant_payment(row: Dict[str, Any]) -> Dict[str, Any]:
    """Tenant payment history row."""
    shaped = _pick(row, PAYMENT_FIELDS)
    shaped["unit_number"] = _flat(row, "unit_number", "lease", "unit", "unit_number")
    shaped["property_name"] = _flat(row, "property_name", "lease", "unit", "property", "name")
    return shaped


# ============================================================
# Maintenance
# ============================================================
MAINTENANCE_FIELDS = (
    "id", "unit_id", "title", "description", "priority", "status",
    "request_date", "scheduled_date", "completed_date",
    "created_at", "updated_at",
)


def shape_maintenance(row: Dict[str, Any]) -> Dict[str, Any]:
    shaped = _pick(row, MAINTENANCE_FIELDS)
    shaped["unit_number"] = _flat(row, "unit_number", "unit", "unit_number")
    shaped["property_name"] = _flat(row, "property_name", "unit", "property", "name")
    shaped["property_address"] = _flat(row, "property_address", "unit", "property", "address")

    if "tenant" in row or "tenant_name" in row:
        shaped["tenant_name"] = _flat(row, "tenant_name", "tenant", "full_name")
    return shaped


# ============================================================
# Leases
# ============================================================
LEASE_FIELDS = (
    "id", "unit_id", "status", "start_date", "end_date",
    "rent_amount", "deposit_amount", "payment_day",
    "created_at", "updated_at",
)


def shape_lease(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Lease with its unit and property names. tenant_name / tenant_email are
    added for the landlord views that embed the tenant; payments when
    the detail view embeds them.
    """
    shaped = _pick(row, LEASE_FIELDS)
    shaped["unit_number"] = _flat(row, "unit_number", "unit", "unit_number")
    shaped["property_name"] = _flat(row, "property_name", "unit", "property", "name")
    shaped["property_address"] = _flat(row, "property_address", "unit", "property", "address")

    if "tenant" in row or "tenant_name" in row:
        shaped["tenant_name"] = _flat(row, "tenant_name", "tenant", "full_name")
        shaped["tenant_email"] = _flat(row, "tenant_email", "tenant", "email", fallback=None)

    if isinstance(row.get("payments"), list):
        shaped["payments"] = [_pick(p, PAYMENT_FIELDS) for p in row["payments"]]
    return shaped


# ============================================================
# Properties / units
# ============================================================
PROPERTY_FIELDS = (
    "id", "name", "address", "city", "property_type", "description",
    "status", "created_at", "updated_at",
)

UNIT_FIELDS = (
    "id", "property_id", "unit_number", "floor_number", "bedrooms",
    "bathrooms", "square_feet", "rent_amount", "status", "amenities",
    "created_at", "updated_at",
)

UNIT_LEASE_FIELDS = ("id", "status", "start_date", "end_date", "rent_amount")


def shape_unit(row: Dict[str, Any]) -> Dict[str, Any]:
    shaped = _pick(row, UNIT_FIELDS)

    if "property" in row or "property_name" in row:
        shaped["property_name"] = _flat(row, "property_name", "property", "name")

    if isinstance(row.get("leases"), list):
        shaped["leases"] = [
            {
                **_pick(lease, UNIT_LEASE_FIELDS),
                "tenant_name": _flat(lease, "tenant_name", "tenant", "full_name"),
            }
            for lease in row["leases"]
        ]
    return shaped


def shape_property(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Property view. owner_id is what the gate checked and is never emitted.
    A `units(count)` embed becomes unit_count; a full embed becomes units.
    """
    shaped = _pick(row, PROPERTY_FIELDS)

    units = row.get("units")
    if isinstance(units, list):
        if len(units) == 1 and set(units[0]) == {"count"}:
            shaped["unit_count"] = units[0]["count"]
        else:
            shaped["units"] = [shape_unit(u) for u in units]
    elif "unit_count" in row:
        shaped["unit_count"] = row["unit_count"]
    return shaped


# ============================================================
# Tenant directory
# ============================================================
TENANT_FIELDS = ("id", "full_name", "email", "phone_number", "created_at")


def shape_tenant(row: Dict[str, Any]) -> Dict[str, Any]:
    """clerk_id stays server-side; has_account says whether one is linked."""
    shaped = _pick(row, TENANT_FIELDS)
    shaped["has_account"] = bool(row["clerk_id"]) if "clerk_id" in row else bool(row.get("has_account"))

    if isinstance(row.get("leases"), list):
        shaped["leases"] = [shape_lease(lease) for lease in row["leases"]]
    return shaped


# ============================================================
# Invoice
# ============================================================
PAID_STATUSES = {"paid", "verified"}


def shape_invoice(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Invoice preview. Payment → tenant, unit → property → landlord.
    Fallbacks name the missing party (Tenant, Property, Unit, Landlord).
    """
    if "invoice_number" in row and "unit" not in row:
        return dict(row)

    payment_id = str(row.get("id") or "")
    unit_number = dig(row, "unit", "unit_number", fallback="Unit")
    property_name = dig(row, "unit", "property", "name", fallback="Property")
    due = row.get("due_date") or row.get("payment_date")

    return {
        "id": row.get("id"),
        "invoice_number": row.get("invoice_number") or f"INV-{payment_id[:6].upper()}",
        "issued_date": _date_only(due),
        "due_date": _date_only(due),
        "paid_date": _date_only(row.get("payment_date")) if row.get("status") in PAID_STATUSES else None,
        "status": row.get("status"),
        "amount": row.get("amount"),
        "tenant_name": dig(row, "tenant", "full_name", fallback="Tenant"),
        "tenant_email": dig(row, "tenant", "email", fallback=None),
        "property_name": property_name,
        "unit_number": unit_number,
        "landlord_name": dig(row, "unit", "property", "landlord", "full_name", fallback="Landlord"),
        "landlord_email": dig(row, "unit", "property", "landlord", "email", fallback=None),
        "description": f"Rent payment for {unit_number} at {property_name}",
        "payment_method": row.get("payment_method"),
    }


def shape_all(rows: Optional[List[Dict[str, Any]]], shaper) -> List[Dict[str, Any]]:
    return [shaper(r) for r in (rows or [])]
