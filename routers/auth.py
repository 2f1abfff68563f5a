# routers/auth.py

from typing import Optional

from fastapi import APIRouter, Body, Depends

from core.errors import api_error, handle_supabase_error
from core.logging_config import logger
from core.roles import normalize_role, parse_requested_role
from dependencies.auth import Subject, get_subject, resolve_role
from models.user import RoleUpdate, RoleUpdateResult
from services.users import set_user_role

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"],
)


# ============================================================
# ROLE SELECTION
# ============================================================
@router.post("/update-role", summary="Choose the caller's role")
def update_role(
    payload: Optional[RoleUpdate] = Body(None),
    subject: Subject = Depends(get_subject),
):
    """
    Only needs a valid session: this is how a freshly signed-up user
    gets a users row. 'landlord' is stored as admin.
    """
    role = parse_requested_role(payload.role if payload else None)
    if role is None:
        raise api_error(400, "Invalid user type")

    try:
        row = set_user_role(subject.external_id, role)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update user role")

    logger.info(f"Role for {subject.external_id} set to {role}")

    result = RoleUpdateResult(
        id=str(row.get("id") or subject.external_id),
        user_type=row.get("user_type") or role,
        role=normalize_role(row.get("user_type") or role),
    )
    return {"success": True, "data": result.model_dump()}


# ============================================================
# CURRENT USER
# ============================================================
@router.get("/me", summary="Who am I")
def me(subject: Subject = Depends(get_subject)):
    """
    Works before role selection: role is None and needs_role_selection
    is true until /api/auth/update-role has been called.
    """
    try:
        user = resolve_role(subject)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch user data")

    if user is None:
        return {
            "success": True,
            "data": {
                "clerk_id": subject.external_id,
                "role": None,
                "needs_role_selection": True,
            },
        }

    return {
        "success": True,
        "data": {
            **user.model_dump(),
            "is_admin": user.is_admin,
            "needs_role_selection": False,
        },
    }
