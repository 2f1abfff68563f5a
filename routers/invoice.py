# routers/invoice.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.errors import api_error, handle_supabase_error
from core.permission_helpers import require
from core.permissions import INVOICE_READ
from core.shaping import shape_invoice
from dependencies.auth import CurrentUser, get_current_user
from services.payments import get_payment_for_invoice

router = APIRouter(
    prefix="/api/invoice",
    tags=["Invoice"],
)


@router.get("/preview", summary="Invoice preview for one payment")
def invoice_preview(
    payment_id: Optional[str] = Query(None, alias="id"),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Admins (landlords) may preview any invoice; tenants only their own.
    """
    if not payment_id:
        raise api_error(400, "Payment ID is required")

    try:
        payment = get_payment_for_invoice(payment_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch payment")

    require(current_user, INVOICE_READ, tenant_id=payment.get("tenant_id"))

    return shape_invoice(payment)
