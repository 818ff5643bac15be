from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from infoco.models.enums import NotificationType
from infoco.schemas.base import Record


class Notification(Record):
    type: NotificationType = NotificationType.SYSTEM
    title: str
    description: str
    date: dt.datetime
    event_date: Optional[dt.date] = None
    read: bool = False
    link: Optional[str] = None


class NotificationCreate(BaseModel):
    type: NotificationType = NotificationType.SYSTEM
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    event_date: Optional[dt.date] = None
    link: Optional[str] = None
