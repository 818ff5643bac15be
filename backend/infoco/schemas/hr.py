from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel, Field, model_validator

from infoco.models.enums import LeaveStatus, LeaveType
from infoco.schemas.base import Record

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class PayrollRecord(Record):
    employee_id: int
    month_year: str = Field(pattern=MONTH_PATTERN)
    base_salary: float = Field(ge=0)
    benefits: float = 0.0
    deductions: float = 0.0
    net_pay: float = 0.0
    pay_date: date


class PayrollGenerateRequest(BaseModel):
    month_year: str = Field(pattern=MONTH_PATTERN)


class PayrollGenerateResponse(BaseModel):
    month_year: str
    created: List[PayrollRecord]
    skipped_employee_ids: List[int]


class LeaveRequest(Record):
    employee_id: int
    type: LeaveType = LeaveType.VACATION
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING

    @model_validator(mode="after")
    def check_period(self) -> "LeaveRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaveStatusUpdate(BaseModel):
    status: LeaveStatus
