from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from infoco.models.enums import ExpenseType, InternalExpenseCategory, PaymentStatus
from infoco.schemas.base import Record


class EmployeeExpense(Record):
    employee_id: int
    type: ExpenseType
    description: str
    amount: float = Field(ge=0)
    date: dt.date
    status: PaymentStatus = PaymentStatus.PENDING
    receipt: Optional[str] = None


class InternalExpense(Record):
    description: str
    category: InternalExpenseCategory
    amount: float = Field(ge=0)
    date: dt.date
    supplier_id: Optional[int] = None


class Supplier(Record):
    name: str
    category: str
    contact_person: str = ""
    email: str = ""
    phone: str = ""
