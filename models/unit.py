# models/unit.py

from typing import List, Optional
from pydantic import BaseModel, Field

from models.enums import UnitStatus


class UnitBase(BaseModel):
    unit_number: str
    floor_number: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    square_feet: Optional[int] = None
    rent_amount: float = Field(..., ge=0)
    status: UnitStatus = UnitStatus.vacant
    amenities: Optional[List[str]] = None


class UnitCreate(UnitBase):
    """
    property_id comes from the URL path.
    """
    pass


class UnitUpdate(BaseModel):
    unit_number: Optional[str] = None
    floor_number: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    square_feet: Optional[int] = None
    rent_amount: Optional[float] = Field(None, ge=0)
    status: Optional[UnitStatus] = None
    amenities: Optional[List[str]] = None
