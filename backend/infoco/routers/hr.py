from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from infoco.core.deps import get_entity_store, require_capability
from infoco.core.errors import NotFoundError
from infoco.models.enums import Capability, LeaveStatus
from infoco.schemas.hr import (
    MONTH_PATTERN,
    LeaveRequest,
    LeaveStatusUpdate,
    PayrollGenerateRequest,
    PayrollGenerateResponse,
    PayrollRecord,
)
from infoco.schemas.user import Principal
from infoco.services import hr as hr_service
from infoco.shared.contracts import API_PREFIXES
from infoco.shared.http import not_found
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["hr"], tags=["hr"])

_require_hr = require_capability(Capability.MANAGE_HR)


@router.get("/payroll", response_model=List[PayrollRecord])
def list_payroll(
    month_year: str = Query(..., pattern=MONTH_PATTERN),
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_hr),
) -> List[PayrollRecord]:
    return [PayrollRecord.model_validate(p) for p in hr_service.payroll_for_month(store, month_year)]


@router.post("/payroll/generate", response_model=PayrollGenerateResponse, status_code=status.HTTP_201_CREATED)
def generate_payroll(
    payload: PayrollGenerateRequest,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_hr),
) -> PayrollGenerateResponse:
    return PayrollGenerateResponse.model_validate(hr_service.generate_payroll(store, payload.month_year))


@router.post("/leave/{leave_id}/status", response_model=LeaveRequest)
def update_leave_status(
    leave_id: int,
    payload: LeaveStatusUpdate,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_hr),
) -> LeaveRequest:
    if payload.status == LeaveStatus.PENDING:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Leave can only be approved or rejected")
    try:
        return LeaveRequest.model_validate(hr_service.set_leave_status(store, leave_id, payload.status))
    except NotFoundError as exc:
        raise not_found(exc, "Leave request") from exc
