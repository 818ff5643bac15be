from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field, field_validator

from infoco.models.enums import TaskStatus
from infoco.schemas.base import Record


class Employee(Record):
    name: str
    position: str
    department: str
    email: str
    base_salary: Optional[float] = Field(default=None, ge=0)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        if not local or not domain:
            raise ValueError("Invalid email address")
        return value


class Task(Record):
    employee_id: int
    title: str
    description: str = ""
    date: dt.date
    hours: float = Field(ge=0)
    status: TaskStatus = TaskStatus.PENDING
