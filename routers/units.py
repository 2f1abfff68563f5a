# routers/units.py

from fastapi import APIRouter, Depends

from core.errors import api_error, handle_supabase_error
from core.permission_helpers import require, requires_permission
from core.permissions import UNITS_READ, UNITS_WRITE
from core.shaping import dig, shape_unit
from core.utils import sanitize, drop_none
from dependencies.auth import CurrentUser
from models.unit import UnitUpdate
from services.units import get_unit, update_unit, delete_unit

router = APIRouter(
    prefix="/api/units",
    tags=["Units"],
)


def _owned_unit(unit_id: str, current_user: CurrentUser, operation: str) -> dict:
    try:
        unit = get_unit(unit_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch unit")

    require(current_user, operation, owner_id=dig(unit, "property", "owner_id", fallback=""))
    return unit


@router.get("/{unit_id}", summary="Unit with its leases")
def read_unit(
    unit_id: str,
    current_user: CurrentUser = Depends(requires_permission(UNITS_READ)),
):
    return shape_unit(_owned_unit(unit_id, current_user, UNITS_READ))


@router.patch("/{unit_id}", summary="Update a unit")
def edit_unit(
    unit_id: str,
    payload: UnitUpdate,
    current_user: CurrentUser = Depends(requires_permission(UNITS_WRITE)),
):
    _owned_unit(unit_id, current_user, UNITS_WRITE)

    data = drop_none(sanitize(payload.model_dump(exclude_unset=True)))
    if not data:
        raise api_error(400, "No fields to update")

    try:
        updated = update_unit(unit_id, data)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update unit")

    if updated is None:
        raise api_error(404, "Unit not found")
    return shape_unit(updated)


@router.delete("/{unit_id}", summary="Delete a unit")
def remove_unit(
    unit_id: str,
    current_user: CurrentUser = Depends(requires_permission(UNITS_WRITE)),
):
    _owned_unit(unit_id, current_user, UNITS_WRITE)

    try:
        deleted = delete_unit(unit_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete unit")

    if not deleted:
        raise api_error(404, "Unit not found")
    return {"success": True}
