from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field

from infoco.models.enums import AssetStatus
from infoco.schemas.base import Record


class MaintenanceRecord(Record):
    date: dt.date
    description: str
    cost: float = Field(ge=0)


class MaintenanceRecordCreate(BaseModel):
    date: dt.date
    description: str = Field(min_length=1)
    cost: float = Field(ge=0)


class Asset(Record):
    name: str
    description: str = ""
    purchase_date: dt.date
    purchase_value: float = Field(ge=0)
    location: str
    status: AssetStatus = AssetStatus.IN_USE
    assigned_to_employee_id: Optional[int] = None
    maintenance_log: List[MaintenanceRecord] = Field(default_factory=list)
