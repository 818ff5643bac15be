from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status

from infoco.core.deps import get_entity_store, require_capability
from infoco.core.errors import NotFoundError
from infoco.models.enums import Capability
from infoco.schemas.notification import Notification, NotificationCreate
from infoco.schemas.user import Principal
from infoco.services import notifications as notification_service
from infoco.shared.contracts import API_PREFIXES
from infoco.shared.http import not_found
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["notifications"], tags=["notifications"])

_require_dashboard = require_capability(Capability.VIEW_DASHBOARD)


@router.get("", response_model=List[Notification])
def list_notifications(
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_dashboard),
) -> List[Notification]:
    return notification_service.list_notifications(store)


@router.post("", response_model=Notification, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_dashboard),
) -> Notification:
    return notification_service.add_notification(store, payload.model_dump(mode="json"))


@router.post("/read-all")
def read_all(
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_dashboard),
) -> dict:
    return {"updated": notification_service.mark_all_read(store)}


@router.post("/{notification_id}/read", response_model=Notification)
def read_notification(
    notification_id: int,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_dashboard),
) -> Notification:
    try:
        return notification_service.mark_read(store, notification_id)
    except NotFoundError as exc:
        raise not_found(exc, "Notification") from exc


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(_require_dashboard),
) -> Response:
    notification_service.delete_notification(store, notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
