from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import Field

from infoco.models.enums import TransactionStatus, TransactionType
from infoco.schemas.base import Record


class Municipality(Record):
    municipality: str
    paid: float = Field(ge=0)
    pending: float = Field(ge=0)
    contract_end_date: date
    coat_of_arms_url: Optional[str] = None


class Transaction(Record):
    type: TransactionType
    description: str
    amount: float = Field(ge=0)
    due_date: date
    payment_date: Optional[date] = None
    status: TransactionStatus = TransactionStatus.PENDING
    municipality_id: Optional[int] = None
