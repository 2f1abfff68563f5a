# core/roles.py

from typing import Optional

from models.enums import UserType


# Display aliases accepted from clients and legacy rows
ROLE_ALIASES = {
    "landlord": UserType.admin.value,
    "property_manager": UserType.admin.value,
}

DEFAULT_ROLE = UserType.tenant.value


def normalize_role(value: Optional[str]) -> str:
    """
    Map a stored/requested role onto a domain role.

    landlord and property_manager collapse to admin; anything missing
    or unrecognised falls back to the creation default (tenant).
    """
    if not value:
        return DEFAULT_ROLE

    role = str(value).strip().lower()
    role = ROLE_ALIASES.get(role, role)

    if role not in UserType.list():
        return DEFAULT_ROLE
    return role


def parse_requested_role(value: Optional[str]) -> Optional[str]:
    """
    Strict variant for role selection: returns None for unknown input
    instead of defaulting, so the caller can answer 400.
    """
    if not value:
        return None

    role = str(value).strip().lower()
    role = ROLE_ALIASES.get(role, role)
    return role if role in UserType.list() else None
