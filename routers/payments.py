# routers/payments.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from core.errors import api_error, handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import require, requires_permission
from core.permissions import PAYMENTS_READ_OWN, PAYMENTS_CREATE
from core.shaping import shape_tenant_payment, shape_all
from dependencies.auth import CurrentUser
from models.enums import LeaseStatus, NotificationType, PaymentStatus
from models.payment import PaymentCreate
from services.leases import get_lease, get_active_lease
from services.notifications import notify_user
from services.payments import (
    list_tenant_payments,
    list_lease_payments,
    summarize_tenant_payments,
    create_payment,
)

router = APIRouter(
    prefix="/api/payments",
    tags=["Payments"],
)


# -----------------------------------------------------
# GET /api/payments
# -----------------------------------------------------
@router.get("", summary="The caller's payment history")
def payment_history(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(requires_permission(PAYMENTS_READ_OWN)),
):
    try:
        rows, total = list_tenant_payments(
            current_user.id,
            status=status_filter.value if status_filter else None,
            limit=limit,
            offset=offset,
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch payments")

    return {
        "success": True,
        "data": shape_all(rows, shape_tenant_payment),
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": offset + len(rows) < total,
        },
    }


# -----------------------------------------------------
# GET /api/payments/summary
# -----------------------------------------------------
@router.get("/summary", summary="Balance and next due date for the caller's lease")
def payment_summary(current_user: CurrentUser = Depends(requires_permission(PAYMENTS_READ_OWN))):
    try:
        lease = get_active_lease(current_user.id)
        payments = list_lease_payments(lease["id"]) if lease else []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch payment summary")

    return summarize_tenant_payments(lease, payments)


# -----------------------------------------------------
# POST /api/payments
# -----------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED, summary="Submit a payment")
def submit_payment(
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(requires_permission(PAYMENTS_CREATE)),
):
    try:
        lease = get_lease(payload.lease_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch lease")

    require(current_user, PAYMENTS_CREATE, tenant_id=lease.get("tenant_id"))

    if lease.get("status") != LeaseStatus.active.value:
        raise api_error(400, "Lease is not active")

    try:
        payment = create_payment(
            tenant_id=lease["tenant_id"],
            lease=lease,
            amount=payload.amount,
            payment_method=payload.payment_method.strip(),
            reference=payload.reference.strip(),
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to record payment")

    notify_user(
        lease["tenant_id"],
        "Payment Submitted",
        f"Your payment of {payload.amount} was received and is pending verification.",
        NotificationType.payment.value,
    )
    logger.info(f"Payment {payment.get('id')} pending review")

    return {"success": True, "data": payment}
