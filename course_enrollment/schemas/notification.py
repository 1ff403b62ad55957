from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class NotificationData(BaseModel):
    status: str
    course: str
    message: str

class Notification(BaseModel):
    id: str
    data: NotificationData
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
