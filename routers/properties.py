# routers/properties.py

from fastapi import APIRouter, Depends, status

from core.errors import api_error, handle_supabase_error
from core.permission_helpers import require, requires_permission
from core.permissions import PROPERTIES_READ, PROPERTIES_WRITE, UNITS_READ, UNITS_WRITE
from core.shaping import shape_property, shape_unit, shape_all
from core.utils import sanitize, drop_none
from dependencies.auth import CurrentUser
from models.property import PropertyCreate, PropertyUpdate
from models.unit import UnitCreate
from services.properties import (
    list_owner_properties,
    get_property,
    create_property,
    update_property,
    delete_property,
)
from services.units import list_property_units, create_unit

router = APIRouter(
    prefix="/api/properties",
    tags=["Properties"],
)


def _owned_property(property_id: str, current_user: CurrentUser, operation: str) -> dict:
    """Fetch a property and gate it on owner_id."""
    try:
        prop = get_property(property_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch property")

    require(current_user, operation, owner_id=prop.get("owner_id"))
    return prop


# -----------------------------------------------------
# LIST / CREATE
# -----------------------------------------------------
@router.get("", summary="Properties owned by the caller")
def list_properties(current_user: CurrentUser = Depends(requires_permission(PROPERTIES_READ))):
    try:
        rows = list_owner_properties(current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch properties")

    return shape_all(rows, shape_property)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a property")
def add_property(
    payload: PropertyCreate,
    current_user: CurrentUser = Depends(requires_permission(PROPERTIES_WRITE)),
):
    data = sanitize(payload.model_dump())
    if not data.get("name"):
        raise api_error(400, "Property name is required")

    try:
        created = create_property(current_user.id, data)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create property")

    return shape_property(created)


# -----------------------------------------------------
# SINGLE PROPERTY
# -----------------------------------------------------
@router.get("/{property_id}", summary="Property with its units")
def read_property(
    property_id: str,
    current_user: CurrentUser = Depends(requires_permission(PROPERTIES_READ)),
):
    return shape_property(_owned_property(property_id, current_user, PROPERTIES_READ))


@router.patch("/{property_id}", summary="Update a property")
def edit_property(
    property_id: str,
    payload: PropertyUpdate,
    current_user: CurrentUser = Depends(requires_permission(PROPERTIES_WRITE)),
):
    _owned_property(property_id, current_user, PROPERTIES_WRITE)

    data = drop_none(sanitize(payload.model_dump(exclude_unset=True)))
    if not data:
        raise api_error(400, "No fields to update")

    try:
        updated = update_property(property_id, current_user.id, data)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update property")

    if updated is None:
        raise api_error(404, "Property not found")
    return shape_property(updated)


@router.delete("/{property_id}", summary="Delete a property")
def remove_property(
    property_id: str,
    current_user: CurrentUser = Depends(requires_permission(PROPERTIES_WRITE)),
):
    _owned_property(property_id, current_user, PROPERTIES_WRITE)

    try:
        deleted = delete_property(property_id, current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete property")

    if not deleted:
        raise api_error(404, "Property not found")
    return {"success": True}


# -----------------------------------------------------
# UNITS OF A PROPERTY
# -----------------------------------------------------
@router.get("/{property_id}/units", summary="Units of a property")
def read_units(
    property_id: str,
    current_user: CurrentUser = Depends(requires_permission(UNITS_READ)),
):
    _owned_property(property_id, current_user, UNITS_READ)

    try:
        rows = list_property_units(property_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch units")

    return shape_all(rows, shape_unit)


@router.post(
    "/{property_id}/units",
    status_code=status.HTTP_201_CREATED,
    summary="Add a unit to a property",
)
def add_unit(
    property_id: str,
    payload: UnitCreate,
    current_user: CurrentUser = Depends(requires_permission(UNITS_WRITE)),
):
    _owned_property(property_id, current_user, UNITS_WRITE)

    data = sanitize(payload.model_dump())
    if not data.get("unit_number"):
        raise api_error(400, "Unit number is required")

    try:
        created = create_unit(property_id, data)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create unit")

    return shape_unit(created)
