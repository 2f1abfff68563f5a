# routers/admin_payments.py

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from core.email_templates import payment_receipt_email, payment_rejected_email
from core.errors import api_error, handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import requires_permission
from core.permissions import PAYMENTS_READ_ALL, PAYMENTS_VERIFY
from core.shaping import shape_admin_payment, shape_all
from dependencies.auth import CurrentUser
from models.enums import NotificationType
from models.payment import PaymentVerify, PaymentReject
from services.notifications import notify_user
from services.payments import list_all_payments, verify_payment, reject_payment
from services.users import get_user_by_id

router = APIRouter(
    prefix="/api/admin/payments",
    tags=["Admin Payments"],
)

DEFAULT_REJECTION_REASON = "Payment verification failed"


def _notify_tenant(payment: dict, reason: Optional[str] = None):
    """In-app notice plus receipt (or rejection) email for the payment's tenant."""
    tenant_id = payment.get("tenant_id")
    if not tenant_id:
        return

    tenant = None
    try:
        tenant = get_user_by_id(tenant_id)
    except Exception as e:
        logger.warning(f"Could not load tenant {tenant_id} for payment notice: {e}")

    name = tenant.get("full_name") if tenant else None
    if reason is None:
        notice = payment_receipt_email(payment, tenant_name=name)
    else:
        notice = payment_rejected_email(payment, reason, tenant_name=name)

    notify_user(
        tenant_id,
        notice.subject,
        notice.text,
        NotificationType.payment.value,
        email=tenant.get("email") if tenant else None,
        html_body=notice.html,
    )


# ============================================================
# LIST ALL PAYMENTS (admin)
# ============================================================
@router.get("", summary="List all payments")
def list_payments(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Omit for all payments"),
    current_user: CurrentUser = Depends(requires_permission(PAYMENTS_READ_ALL)),
):
    """
    Every payment, newest first, flattened with tenant, unit and property names.
    """
    try:
        rows = list_all_payments(limit=limit)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch payments")

    return shape_all(rows, shape_admin_payment)


# ============================================================
# VERIFY PAYMENT (admin)
# ============================================================
@router.post("/verify", summary="Verify a payment")
def verify(
    payload: Optional[PaymentVerify] = Body(None),
    current_user: CurrentUser = Depends(requires_permission(PAYMENTS_VERIFY)),
):
    if payload is None or not payload.payment_id:
        raise api_error(400, "Payment ID is required")

    try:
        payment = verify_payment(payload.payment_id, current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to verify payment")

    if payment is None:
        raise api_error(404, "Payment not found")

    _notify_tenant(payment)
    return payment


# ============================================================
# REJECT PAYMENT (admin)
# ============================================================
@router.post("/reject", summary="Reject a payment")
def reject(
    payload: Optional[PaymentReject] = Body(None),
    current_user: CurrentUser = Depends(requires_permission(PAYMENTS_VERIFY)),
):
    if payload is None or not payload.payment_id:
        raise api_error(400, "Payment ID is required")

    reason = (payload.reason or "").strip() or DEFAULT_REJECTION_REASON

    try:
        payment = reject_payment(payload.payment_id, current_user.id, reason)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to reject payment")

    if payment is None:
        raise api_error(404, "Payment not found")

    _notify_tenant(payment, reason=reason)
    return payment
