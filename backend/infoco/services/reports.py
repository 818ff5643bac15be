from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from infoco.core.errors import ValidationError
from infoco.models.enums import TaskStatus
from infoco.services.notifications import unread_count
from infoco.store.entities import EntityStore

PERIOD_CHOICES = ("7", "30", "90", "365", "all")


def dashboard_summary(store: EntityStore) -> Dict[str, Any]:
    employees = store.collection("employees").all()
    tasks = store.collection("tasks").all()
    finance = store.collection("finance").all()

    done = TaskStatus.DONE.value
    completed = sum(1 for t in tasks if t.get("status") == done)
    stats = {
        "employees": len(employees),
        "total_tasks": len(tasks),
        "completed_tasks": completed,
        "pending_tasks": len(tasks) - completed,
        "unread_notifications": unread_count(store),
    }

    events: List[Dict[str, Any]] = [
        {
            "id": item["id"],
            "date": item["contract_end_date"],
            "title": f"Vencimento Contrato: {item['municipality']}",
            "type": "contract",
            "color": "red",
            "view": "municipalities",
        }
        for item in finance
    ]
    events.extend(
        {
            "id": task["id"],
            "date": task["date"],
            "title": f"Tarefa: {task['title']}",
            "type": "task",
            "color": "blue",
            "view": "tasks",
        }
        for task in tasks
    )
    return {"stats": stats, "events": events}


def task_report(
    store: EntityStore,
    period: str = "30",
    department: Optional[str] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    if period not in PERIOD_CHOICES:
        raise ValidationError(["period"], f"Período inválido: {period}")

    employees = store.collection("employees").all()
    tasks = store.collection("tasks").all()

    if period != "all":
        cutoff = (today or date.today()) - timedelta(days=int(period))
        tasks = [t for t in tasks if date.fromisoformat(t["date"]) >= cutoff]

    if department:
        employees = [e for e in employees if e.get("department") == department]
        in_department = {e["id"] for e in employees}
        tasks = [t for t in tasks if t.get("employee_id") in in_department]

    done = TaskStatus.DONE.value
    total_hours = sum(float(t.get("hours") or 0) for t in tasks)
    completed = sum(1 for t in tasks if t.get("status") == done)

    per_employee = []
    for employee in employees:
        own = [t for t in tasks if t.get("employee_id") == employee["id"]]
        hours = sum(float(t.get("hours") or 0) for t in own)
        own_completed = sum(1 for t in own if t.get("status") == done)
        if hours > 0 or own_completed > 0:
            per_employee.append(
                {
                    "employee_id": employee["id"],
                    "name": employee["name"],
                    "total_hours": hours,
                    "completed_tasks": own_completed,
                }
            )

    return {
        "period": period,
        "department": department or None,
        "total_tasks": len(tasks),
        "total_hours": total_hours,
        "completed_tasks": completed,
        "completion_rate": round(completed / len(tasks) * 100) if tasks else 0,
        "employees": per_employee,
    }
