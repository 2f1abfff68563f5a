# routers/tenants.py

from fastapi import APIRouter, Depends, status

from core.errors import NotFoundError, api_error, handle_supabase_error
from core.permission_helpers import requires_permission
from core.permissions import TENANTS_READ, TENANTS_WRITE
from core.shaping import shape_tenant, shape_all
from core.utils import sanitize, drop_none
from dependencies.auth import CurrentUser
from models.tenant import TenantCreate, TenantUpdate
from services.users import list_tenants, get_tenant, create_tenant, update_tenant

router = APIRouter(
    prefix="/api/tenants",
    tags=["Tenants"],
)


@router.get("", summary="Tenant directory")
def read_tenants(current_user: CurrentUser = Depends(requires_permission(TENANTS_READ))):
    """
    Every tenant-role user, including ones without a lease yet,
    so a landlord can allocate a unit to them.
    """
    try:
        rows = list_tenants()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch tenants")

    return shape_all(rows, shape_tenant)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add a tenant to the directory")
def add_tenant(
    payload: TenantCreate,
    current_user: CurrentUser = Depends(requires_permission(TENANTS_WRITE)),
):
    data = sanitize(payload.model_dump())
    data["email"] = data["email"].lower()

    try:
        created = create_tenant(data)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create tenant")

    return shape_tenant(created)


@router.get("/{tenant_id}", summary="Tenant with leases")
def read_tenant(
    tenant_id: str,
    current_user: CurrentUser = Depends(requires_permission(TENANTS_READ)),
):
    try:
        return shape_tenant(get_tenant(tenant_id))
    except NotFoundError:
        raise api_error(404, "Tenant not found")
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch tenant")


@router.patch("/{tenant_id}", summary="Update a tenant's contact details")
def edit_tenant(
    tenant_id: str,
    payload: TenantUpdate,
    current_user: CurrentUser = Depends(requires_permission(TENANTS_WRITE)),
):
    data = drop_none(sanitize(payload.model_dump(exclude_unset=True)))
    if not data:
        raise api_error(400, "No fields to update")
    if "email" in data:
        data["email"] = data["email"].lower()

    try:
        updated = update_tenant(tenant_id, data)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update tenant")

    if updated is None:
        raise api_error(404, "Tenant not found")
    return shape_tenant(updated)
