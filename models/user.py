# models/user.py

from typing import Optional
from pydantic import BaseModel, Field


# ===============================================================
# users TABLE (mirrors Clerk identities)
# ===============================================================

class RoleUpdate(BaseModel):
    """
    Body of POST /api/auth/update-role.
    Accepts 'tenant', 'admin' or the 'landlord' alias.
    """
    role: Optional[str] = Field(None, description="tenant | admin | landlord")


class RoleUpdateResult(BaseModel):
    id: str
    user_type: str
    role: str
