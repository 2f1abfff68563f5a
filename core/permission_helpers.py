from enum import Enum
from typing import NamedTuple, Optional

from fastapi import Depends, HTTPException

from core.config import settings
from core.errors import api_error
from core.logging_config import get_logger
from core.permissions import (
    ROLE_PERMISSIONS,
    TENANT_SCOPED,
    PROPERTY_SCOPED,
    INVOICE_READ,
)
from core.roles import normalize_role
from dependencies.auth import get_current_user, CurrentUser

log = get_logger("authz")


class DenyReason(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"


class Decision(NamedTuple):
    allowed: bool
    reason: Optional[DenyReason] = None
    message: Optional[str] = None


ALLOW = Decision(True)


def _deny_forbidden(message: str) -> Decision:
    return Decision(False, DenyReason.FORBIDDEN, message)


# -----------------------------------------------------
# Policy lookups
# -----------------------------------------------------
def role_allows(role: Optional[str], operation: str) -> bool:
    return operation in ROLE_PERMISSIONS.get(normalize_role(role), [])


# -----------------------------------------------------
# Authorization gate
# -----------------------------------------------------
def authorize(
    user: Optional[CurrentUser],
    operation: str,
    owner_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
) -> Decision:
    """
    Decide whether `user` may perform `operation`.

    owner_id   owning landlord of the property behind the resource
    tenant_id  tenant the resource belongs to

    Hints that are None are not checked; list endpoints pass none and
    scope their query to the caller instead.
    """
    if user is None:
        return Decision(False, DenyReason.UNAUTHENTICATED, "Unauthorized")

    role = normalize_role(user.role)

    if not role_allows(role, operation):
        if role != "admin":
            return _deny_forbidden("Unauthorized - Admin access required")
        return _deny_forbidden(f"Role '{role}' may not perform '{operation}'")

    if operation == INVOICE_READ:
        if role == "admin":
            return ALLOW
        if tenant_id is not None and str(tenant_id) == str(user.id):
            return ALLOW
        return _deny_forbidden("Unauthorized to view this payment")

    if operation in TENANT_SCOPED and tenant_id is not None:
        if str(tenant_id) == str(user.id):
            return ALLOW
        if role == "admin" and settings.ADMIN_READS_TENANT_DATA:
            return ALLOW
        return _deny_forbidden("You do not have access to this resource")

    if operation in PROPERTY_SCOPED and owner_id is not None:
        if str(owner_id) == str(user.id):
            return ALLOW
        return _deny_forbidden("You do not own this property")

    return ALLOW


def enforce(decision: Decision) -> None:
    """Raise the HTTP form of a denial (401 / 403)."""
    if decision.allowed:
        return

    if decision.reason == DenyReason.UNAUTHENTICATED:
        raise HTTPException(
            status_code=401,
            detail={"error": decision.message or "Unauthorized"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    raise api_error(403, decision.message or "Forbidden")


def require(
    user: Optional[CurrentUser],
    operation: str,
    owner_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
) -> None:
    decision = authorize(user, operation, owner_id=owner_id, tenant_id=tenant_id)
    if not decision.allowed:
        log.info(
            f"Denied {operation} for user={getattr(user, 'id', None)} "
            f"reason={decision.reason.value}"
        )
    enforce(decision)


# -----------------------------------------------------
# FastAPI dependency wrapper
# -----------------------------------------------------
def requires_permission(operation: str):
    """
    Usage:
        @router.get("/", dependencies=[Depends(requires_permission(PAYMENTS_READ_ALL))])
    or take the returned user:
        current_user: CurrentUser = Depends(requires_permission(PAYMENTS_READ_ALL))
    """

    def dependency(current_user: CurrentUser = Depends(get_current_user)):
        require(current_user, operation)
        return current_user

    return dependency
