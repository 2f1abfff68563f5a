# routers/leases.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from core.errors import NotFoundError, api_error, handle_supabase_error
from core.permission_helpers import require, requires_permission
from core.permissions import LEASES_READ, LEASES_WRITE
from core.roles import normalize_role
from core.shaping import dig, shape_lease, shape_all
from core.utils import drop_none
from dependencies.auth import CurrentUser
from models.enums import LeaseStatus
from models.lease import LeaseCreate, LeaseUpdate
from services.leases import (
    list_owner_leases,
    get_lease_detail,
    unit_has_active_lease,
    create_lease,
    update_lease,
)
from services.units import get_unit
from services.users import get_user_by_id

router = APIRouter(
    prefix="/api/leases",
    tags=["Leases"],
)


def _owned_lease(lease_id: str, current_user: CurrentUser, operation: str) -> dict:
    """Fetch a lease and gate it on its unit's property owner."""
    try:
        lease = get_lease_detail(lease_id)
    except NotFoundError:
        raise api_error(404, "Lease not found")
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch lease")

    require(current_user, operation, owner_id=dig(lease, "unit", "property", "owner_id", fallback=""))
    return lease


# -----------------------------------------------------
# LIST / CREATE
# -----------------------------------------------------
@router.get("", summary="Leases on the caller's properties")
def list_leases(
    status_filter: Optional[LeaseStatus] = Query(None, alias="status"),
    current_user: CurrentUser = Depends(requires_permission(LEASES_READ)),
):
    try:
        rows = list_owner_leases(
            current_user.id,
            status=status_filter.value if status_filter else None,
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch leases")

    return shape_all(rows, shape_lease)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Allocate a unit to a tenant")
def add_lease(
    payload: LeaseCreate,
    current_user: CurrentUser = Depends(requires_permission(LEASES_WRITE)),
):
    """
    The unit must belong to one of the caller's properties and the
    tenant must be a tenant. An active lease marks the unit occupied;
    a unit can hold only one active lease.
    """
    if payload.end_date <= payload.start_date:
        raise api_error(400, "end_date must be after start_date")

    try:
        unit = get_unit(payload.unit_id)
    except NotFoundError:
        raise api_error(404, "Unit not found")
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch unit")

    require(current_user, LEASES_WRITE, owner_id=dig(unit, "property", "owner_id", fallback=""))

    try:
        tenant = get_user_by_id(payload.tenant_id)
        occupied = payload.status == LeaseStatus.active and unit_has_active_lease(payload.unit_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create lease")

    if not tenant or normalize_role(tenant.get("user_type")) != "tenant":
        raise api_error(400, "Tenant not found")
    if occupied:
        raise api_error(409, "Unit already has an active lease")

    data = payload.model_dump(mode="json")
    if data.get("rent_amount") is None:
        data["rent_amount"] = unit.get("rent_amount")

    try:
        created = create_lease(drop_none(data))
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create lease")

    return shape_lease(created)


# -----------------------------------------------------
# SINGLE LEASE
# -----------------------------------------------------
@router.get("/{lease_id}", summary="Lease with tenant, unit and payments")
def read_lease(
    lease_id: str,
    current_user: CurrentUser = Depends(requires_permission(LEASES_READ)),
):
    return shape_lease(_owned_lease(lease_id, current_user, LEASES_READ))


@router.patch("/{lease_id}", summary="Update, renew or end a lease")
def edit_lease(
    lease_id: str,
    payload: LeaseUpdate,
    current_user: CurrentUser = Depends(requires_permission(LEASES_WRITE)),
):
    """
    Setting status to expired or terminated frees the unit; reactivating
    occupies it again.
    """
    lease = _owned_lease(lease_id, current_user, LEASES_WRITE)

    data = drop_none(payload.model_dump(exclude_unset=True, mode="json"))
    if not data:
        raise api_error(400, "No fields to update")

    start = str(lease.get("start_date") or "")[:10]
    if data.get("end_date") and start and data["end_date"] <= start:
        raise api_error(400, "end_date must be after start_date")

    reopening = data.get("status") == LeaseStatus.active.value and lease.get("status") != LeaseStatus.active.value
    if reopening:
        try:
            occupied = unit_has_active_lease(lease.get("unit_id"))
        except Exception as e:
            raise handle_supabase_error(e, "Failed to update lease")
        if occupied:
            raise api_error(409, "Unit already has an active lease")

    try:
        updated = update_lease(lease_id, lease.get("unit_id"), data)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update lease")

    if updated is None:
        raise api_error(404, "Lease not found")
    return shape_lease(updated)
