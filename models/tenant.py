# models/tenant.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TenantCreate(BaseModel):
    """
    Directory entry added by a landlord. user_type is always 'tenant';
    the row has no clerk_id until the person signs up.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: Optional[str] = None


class TenantUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: Optional[str] = None
