from __future__ import annotations

import logging
from typing import Any, Dict, List

from infoco.core.errors import NotFoundError
from infoco.models.enums import LeaveStatus
from infoco.store.entities import EntityStore

logger = logging.getLogger(__name__)

BENEFITS_RATE = 0.10
DEDUCTIONS_RATE = 0.08
PAY_DAY = 5


def _round(value: float) -> float:
    return round(value, 2)


def payroll_for_month(store: EntityStore, month_year: str) -> List[Dict[str, Any]]:
    return [p for p in store.collection("payrolls").all() if p.get("month_year") == month_year]


def generate_payroll(store: EntityStore, month_year: str) -> Dict[str, Any]:
    """Create one payroll record per salaried employee that has none for ``month_year``.

    Re-running for the same month is a no-op for employees already paid.
    """
    employees = store.collection("employees").all()
    payrolls = store.collection("payrolls")
    already_paid = {p.get("employee_id") for p in payroll_for_month(store, month_year)}

    created: List[Dict[str, Any]] = []
    skipped: List[int] = []
    for employee in employees:
        base_salary = employee.get("base_salary")
        if not base_salary or employee["id"] in already_paid:
            skipped.append(employee["id"])
            continue
        base_salary = float(base_salary)
        benefits = _round(base_salary * BENEFITS_RATE)
        deductions = _round(base_salary * DEDUCTIONS_RATE)
        record = payrolls.insert(
            {
                "employee_id": employee["id"],
                "month_year": month_year,
                "base_salary": base_salary,
                "benefits": benefits,
                "deductions": deductions,
                "net_pay": _round(base_salary + benefits - deductions),
                "pay_date": f"{month_year}-{PAY_DAY:02d}",
            }
        )
        created.append(record)

    logger.info("payroll_generated month=%s created=%s skipped=%s", month_year, len(created), len(skipped))
    return {"month_year": month_year, "created": created, "skipped_employee_ids": skipped}


def set_leave_status(store: EntityStore, leave_id: int, status: LeaveStatus) -> Dict[str, Any]:
    leaves = store.collection("leave_requests")
    leave = leaves.get(leave_id)
    if leave is None:
        raise NotFoundError("leave_requests", leave_id)
    leave["status"] = LeaveStatus(status).value
    return leaves.replace(leave)
