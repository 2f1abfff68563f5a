# services/payments.py

from datetime import date
from typing import List, Optional, Tuple

from core.errors import NotFoundError
from core.logging_config import get_logger
from core.supabase_client import get_supabase_client
from core.utils import utcnow_iso
from models.enums import PaymentStatus

log = get_logger("payments")


# ============================================================
# Join shapes
# payments carries tenant_id, lease_id and unit_id; it has two FKs to
# users (tenant_id, verified_by), so user embeds name the column.
# ============================================================
ADMIN_LIST_SELECT = """
    *,
    tenant:users!tenant_id(id, full_name, email),
    lease:leases(
        id,
        unit_id,
        unit:units(
            id,
            unit_number,
            property:properties(id, name)
        )
    )
"""

RECENT_SELECT = """
    id,
    amount,
    payment_date,
    status,
    lease:leases(
        id,
        tenant:users!tenant_id(id, full_name),
        unit:units(id, unit_number)
    )
"""

TENANT_HISTORY_SELECT = """
    *,
    lease:leases(
        unit_id,
        unit:units(
            unit_number,
            property:properties(name, address)
        )
    )
"""

# tenant_id and property.owner_id are required by the invoice gate
INVOICE_SELECT = """
    *,
    tenant:users!tenant_id(id, full_name, email),
    unit:units!unit_id(
        id,
        unit_number,
        property:properties(
            id,
            name,
            owner_id,
            landlord:users!owner_id(id, full_name, email)
        )
    )
"""


# ============================================================
# Reads
# ============================================================
def list_all_payments(limit: Optional[int] = None) -> List[dict]:
    client = get_supabase_client()
    query = (
        client.table("payments")
        .select(ADMIN_LIST_SELECT)
        .order("payment_date", desc=True)
    )
    if limit:
        query = query.limit(limit)
    return query.execute().data or []


def list_recent_payments(limit: int = 3) -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("payments")
        .select(RECENT_SELECT)
        .order("payment_date", desc=True)
        .limit(limit)
        .execute()
    )
    return res.data or []


def list_tenant_payments(
    tenant_id: str,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[List[dict], int]:
    """
    Payment history for one tenant, newest first.
    Returns (rows, total matching rows).
    """
    client = get_supabase_client()
    query = (
        client.table("payments")
        .select(TENANT_HISTORY_SELECT, count="exact")
        .eq("tenant_id", tenant_id)
    )
    if status:
        query = query.eq("status", status)

    query = query.order("payment_date", desc=True)
    if limit:
        query = query.range(offset, offset + limit - 1)

    res = query.execute()
    rows = res.data or []
    total = res.count if res.count is not None else len(rows)
    return rows, total


def get_payment_for_invoice(payment_id: str) -> dict:
    client = get_supabase_client()
    res = (
        client.table("payments")
        .select(INVOICE_SELECT)
        .eq("id", payment_id)
        .limit(1)
        .execute()
    )
    if not res.data:
        raise NotFoundError("Payment", payment_id)
    return res.data[0]


def list_lease_payments(lease_id: str) -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("payments")
        .select("id, amount, payment_date, status")
        .eq("lease_id", lease_id)
        .order("payment_date", desc=True)
        .execute()
    )
    return res.data or []


# Statuses that count as money received
SETTLED_STATUSES = {PaymentStatus.verified.value, PaymentStatus.paid.value}


def _next_month(day: date) -> date:
    return date(day.year + 1, 1, 1) if day.month == 12 else date(day.year, day.month + 1, 1)


def summarize_tenant_payments(lease: Optional[dict], payments: List[dict], today: Optional[date] = None) -> dict:
    """
    Balance card for the tenant dashboard.

    current_balance is this month's rent less what has settled this month.
    next_payment_due is this month's due day while a balance remains,
    otherwise next month's.
    """
    if not lease:
        return {
            "has_lease": False,
            "rent_amount": 0.0,
            "total_paid": 0.0,
            "pending_amount": 0.0,
            "current_balance": 0.0,
            "next_payment_due": None,
        }

    today = today or date.today()
    month = today.isoformat()[:7]

    rent = float(lease.get("rent_amount") or 0)
    settled = [p for p in payments if p.get("status") in SETTLED_STATUSES]
    total_paid = sum(float(p.get("amount") or 0) for p in settled)
    paid_this_month = sum(
        float(p.get("amount") or 0) for p in settled
        if str(p.get("payment_date") or "")[:7] == month
    )
    pending = sum(
        float(p.get("amount") or 0) for p in payments
        if p.get("status") == PaymentStatus.pending.value
    )

    balance = max(rent - paid_this_month, 0.0)
    due_day = int(lease.get("payment_day") or 1)
    due_month = today.replace(day=1) if balance > 0 else _next_month(today)

    return {
        "has_lease": True,
        "rent_amount": rent,
        "total_paid": total_paid,
        "pending_amount": pending,
        "current_balance": balance,
        "next_payment_due": due_month.replace(day=due_day).isoformat(),
    }


# ============================================================
# Writes
# ============================================================
def create_payment(
    tenant_id: str,
    lease: dict,
    amount: float,
    payment_method: str,
    reference: str,
) -> dict:
    """
    Record a tenant-submitted payment against their lease.
    Lands as pending until an admin verifies or rejects it.
    """
    now = utcnow_iso()
    row = {
        "tenant_id": tenant_id,
        "lease_id": lease["id"],
        "unit_id": lease.get("unit_id"),
        "amount": amount,
        "payment_method": payment_method,
        "reference": reference,
        "payment_date": now,
        "status": PaymentStatus.pending.value,
        "created_at": now,
        "updated_at": now,
    }

    client = get_supabase_client()
    res = client.table("payments").insert(row).execute()
    log.info(f"Tenant {tenant_id} submitted payment of {amount} on lease {lease['id']}")
    return res.data[0] if res.data else row


def _review_payment(payment_id: str, fields: dict) -> Optional[dict]:
    now = utcnow_iso()
    client = get_supabase_client()
    res = (
        client.table("payments")
        .update({**fields, "verification_date": now, "updated_at": now})
        .eq("id", payment_id)
        .execute()
    )
    return res.data[0] if res.data else None


def verify_payment(payment_id: str, admin_id: str) -> Optional[dict]:
    """
    Returns the updated payment, or None if no row has this id.
    """
    updated = _review_payment(payment_id, {
        "status": PaymentStatus.verified.value,
        "verified_by": admin_id,
    })
    if updated:
        log.info(f"Payment {payment_id} verified by {admin_id}")
    return updated


def reject_payment(payment_id: str, admin_id: str, reason: str) -> Optional[dict]:
    updated = _review_payment(payment_id, {
        "status": PaymentStatus.rejected.value,
        "verified_by": admin_id,
        "rejection_reason": reason,
    })
    if updated:
        log.info(f"Payment {payment_id} rejected by {admin_id}: {reason}")
    return updated
