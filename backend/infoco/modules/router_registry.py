"""Central router registry for module-oriented composition."""
from __future__ import annotations

from fastapi import FastAPI

from infoco.modules.access.router import ROUTERS as ACCESS_ROUTERS
from infoco.modules.assistant.router import ROUTERS as ASSISTANT_ROUTERS
from infoco.modules.operations.router import ROUTERS as OPERATIONS_ROUTERS
from infoco.modules.records.router import ROUTERS as RECORD_ROUTERS

ALL_ROUTERS = (
    ACCESS_ROUTERS
    + RECORD_ROUTERS
    + OPERATIONS_ROUTERS
    + ASSISTANT_ROUTERS
)


def include_all_routers(app: FastAPI) -> None:
    for router in ALL_ROUTERS:
        app.include_router(router)
