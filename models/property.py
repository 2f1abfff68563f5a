# models/property.py

from typing import Optional
from pydantic import BaseModel, Field


# -------------------------------------------------
# Shared fields
# -------------------------------------------------
class PropertyBase(BaseModel):
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    property_type: Optional[str] = None
    description: Optional[str] = None


# -------------------------------------------------
# Create
# -------------------------------------------------
class PropertyCreate(PropertyBase):
    """
    owner_id is always taken from the caller, never the payload.
    """
    pass


# -------------------------------------------------
# Update (PATCH)
# -------------------------------------------------
class PropertyUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    property_type: Optional[str] = None
    description: Optional[str] = None


# -------------------------------------------------
# Dashboard statistics
# -------------------------------------------------
class PropertyStats(BaseModel):
    total_properties: int = 0
    total_units: int = 0
    occupied_units: int = 0
    vacant_units: int = 0
    total_potential_revenue: float = 0
    actual_revenue: float = 0
    occupancy_rate: float = Field(0, description="Occupied / total units, 0–100")
