# models/maintenance.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from models.enums import MaintenancePriority, MaintenanceStatus


class MaintenanceRequestCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    unit_id: Optional[str] = Field(
        None,
        alias="unitId",
        description="Defaults to the unit on the tenant's active lease",
    )
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    priority: MaintenancePriority = MaintenancePriority.medium


class MaintenanceStatusUpdate(BaseModel):
    status: MaintenanceStatus
    message: Optional[str] = Field(None, description="Entry for the request's update log")
    scheduled_date: Optional[str] = None
