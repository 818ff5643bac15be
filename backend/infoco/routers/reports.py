from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from infoco.core.deps import get_entity_store, require_capability
from infoco.core.errors import ValidationError
from infoco.models.enums import Capability
from infoco.schemas.report import DashboardSummary, TaskReport
from infoco.schemas.user import Principal
from infoco.services import reports as report_service
from infoco.shared.contracts import API_PREFIXES
from infoco.shared.http import validation_failed
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["reports"], tags=["reports"])


@router.get("/dashboard", response_model=DashboardSummary)
def dashboard(
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(require_capability(Capability.VIEW_DASHBOARD)),
) -> DashboardSummary:
    return DashboardSummary.model_validate(report_service.dashboard_summary(store))


@router.get("/tasks", response_model=TaskReport)
def task_report(
    period: str = Query("30", description="Days back from today, or 'all'"),
    department: Optional[str] = Query(None),
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(require_capability(Capability.VIEW_REPORTS)),
) -> TaskReport:
    try:
        return TaskReport.model_validate(report_service.task_report(store, period, department))
    except ValidationError as exc:
        raise validation_failed(exc) from exc
