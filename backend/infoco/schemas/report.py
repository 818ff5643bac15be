from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel


class DashboardStats(BaseModel):
    employees: int
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    unread_notifications: int


class CalendarEvent(BaseModel):
    id: int
    date: dt.date
    title: str
    type: Literal["contract", "task"]
    color: str
    view: str


class DashboardSummary(BaseModel):
    stats: DashboardStats
    events: List[CalendarEvent]


class EmployeeReport(BaseModel):
    employee_id: int
    name: str
    total_hours: float
    completed_tasks: int


class TaskReport(BaseModel):
    period: str
    department: Optional[str] = None
    total_tasks: int
    total_hours: float
    completed_tasks: int
    completion_rate: int
    employees: List[EmployeeReport]
