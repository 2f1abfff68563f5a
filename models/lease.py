# models/lease.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from models.enums import LeaseStatus


class LeaseCreate(BaseModel):
    """
    Allocate a unit to a tenant. rent_amount defaults to the unit's rent.
    """
    model_config = ConfigDict(populate_by_name=True)

    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    unit_id: str = Field(..., alias="unitId", min_length=1)
    start_date: date
    end_date: date
    rent_amount: Optional[float] = Field(None, ge=0)
    deposit_amount: Optional[float] = Field(None, ge=0)
    payment_day: int = Field(1, ge=1, le=28, description="Day of month rent is due")
    status: LeaseStatus = LeaseStatus.active


class LeaseUpdate(BaseModel):
    """
    Partial update. tenant_id and unit_id are fixed once a lease exists.
    """
    end_date: Optional[date] = None
    rent_amount: Optional[float] = Field(None, ge=0)
    deposit_amount: Optional[float] = Field(None, ge=0)
    payment_day: Optional[int] = Field(None, ge=1, le=28)
    status: Optional[LeaseStatus] = None
