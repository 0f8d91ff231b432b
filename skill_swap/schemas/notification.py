from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationOut(BaseModel):
    id: int
    recipient_id: int
    actor_id: Optional[int] = None
    swap_request_id: Optional[int] = None
    event_type: str
    title: str
    message: str
    action_url: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
