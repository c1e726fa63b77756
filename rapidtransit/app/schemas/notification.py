"""
Notification Schemas.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional
from rapidtransit.app.models.notification import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: NotificationType
    title: str
    message: str
    parcel_id: Optional[int]
    is_read: bool
    created_at: datetime
    read_at: Optional[datetime]
