# models/notification.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class NotificationMarkRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    notification_id: Optional[str] = Field(None, alias="notificationId")
    read: bool = True
