from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from infoco.core.deps import get_entity_store
from infoco.core.security import api_key_matches
from infoco.core.settings import settings
from infoco.shared.contracts import API_PREFIXES
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["public"], tags=["public"])

TASKS_CACHE_CONTROL = "s-maxage=60, stale-while-revalidate=300"
UNKNOWN_EMPLOYEE = "Unknown"


@router.get("/tasks")
def public_tasks(
    authorization: Optional[str] = Header(None),
    store: EntityStore = Depends(get_entity_store),
) -> JSONResponse:
    if not settings.public_api_key:
        return JSONResponse(
            status_code=500,
            content={"error": f"A chave da API de tarefas (INFOCO_API_KEY) não foi encontrada no ambiente '{settings.environment}'."},
        )
    if not authorization or not authorization.startswith("Bearer "):
        return JSONResponse(
            status_code=401,
            content={"error": 'Authorization header is missing or malformed. It must be in the format: "Bearer <API_KEY>".'},
        )
    if not api_key_matches(authorization.split(" ", 1)[1].strip(), settings.public_api_key):
        return JSONResponse(status_code=401, content={"error": "Invalid API key provided."})

    employees = {e["id"]: e for e in store.collection("employees").all()}
    data = []
    for task in store.collection("tasks").all():
        task = dict(task)
        employee_id = task.pop("employee_id", None)
        employee = employees.get(employee_id)
        data.append(
            {
                **task,
                "employee": {
                    "id": employee_id,
                    "name": employee["name"] if employee else UNKNOWN_EMPLOYEE,
                    "department": employee["department"] if employee else UNKNOWN_EMPLOYEE,
                },
            }
        )
    return JSONResponse(content={"data": data}, headers={"Cache-Control": TASKS_CACHE_CONTROL})
