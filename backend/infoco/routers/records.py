from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from infoco.core.deps import get_current_principal, get_entity_store, get_permission_model
from infoco.core.errors import NotFoundError, ValidationError
from infoco.core.rbac import PermissionModel
from infoco.models.enums import Capability
from infoco.schemas.user import Principal
from infoco.services.records import RecordTableController, controller_for
from infoco.shared.contracts import API_PREFIXES
from infoco.shared.http import not_found, validation_failed
from infoco.store.collections import COLLECTIONS
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["records"], tags=["records"])
logger = logging.getLogger(__name__)


def _get_controller_or_404(store: EntityStore, collection: str) -> RecordTableController:
    spec = COLLECTIONS.get(collection)
    if spec is None or not spec.generic_api:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Collection not found")
    return controller_for(store, collection)


def _require(permissions: PermissionModel, principal: Principal, capability: Capability) -> None:
    if not permissions.allows(principal.role, capability):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorised for this collection")


@router.get("/{collection}", response_model=List[Dict[str, Any]])
def list_records(
    collection: str,
    store: EntityStore = Depends(get_entity_store),
    permissions: PermissionModel = Depends(get_permission_model),
    principal: Principal = Depends(get_current_principal),
) -> List[Dict[str, Any]]:
    controller = _get_controller_or_404(store, collection)
    _require(permissions, principal, controller.spec.view_capability)
    return controller.rows()


@router.get("/{collection}/draft", response_model=Dict[str, Any])
def create_draft(
    collection: str,
    store: EntityStore = Depends(get_entity_store),
    permissions: PermissionModel = Depends(get_permission_model),
    principal: Principal = Depends(get_current_principal),
) -> Dict[str, Any]:
    controller = _get_controller_or_404(store, collection)
    _require(permissions, principal, controller.spec.manage_capability)
    return controller.begin_create()


@router.get("/{collection}/{record_id}/draft", response_model=Dict[str, Any])
def edit_draft(
    collection: str,
    record_id: int,
    store: EntityStore = Depends(get_entity_store),
    permissions: PermissionModel = Depends(get_permission_model),
    principal: Principal = Depends(get_current_principal),
) -> Dict[str, Any]:
    controller = _get_controller_or_404(store, collection)
    _require(permissions, principal, controller.spec.manage_capability)
    try:
        return controller.begin_edit(record_id)
    except NotFoundError as exc:
        raise not_found(exc) from exc


@router.post("/{collection}", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
def create_record(
    collection: str,
    draft: Dict[str, Any] = Body(...),
    store: EntityStore = Depends(get_entity_store),
    permissions: PermissionModel = Depends(get_permission_model),
    principal: Principal = Depends(get_current_principal),
) -> Dict[str, Any]:
    controller = _get_controller_or_404(store, collection)
    _require(permissions, principal, controller.spec.manage_capability)
    values = {key: value for key, value in draft.items() if key != "id"}
    if collection == "update_posts" and values.get("author_id") is None:
        values["author_id"] = principal.user_id
    try:
        return controller.submit(values)
    except ValidationError as exc:
        raise validation_failed(exc) from exc


@router.put("/{collection}/{record_id}", response_model=Dict[str, Any])
def update_record(
    collection: str,
    record_id: int,
    draft: Dict[str, Any] = Body(...),
    store: EntityStore = Depends(get_entity_store),
    permissions: PermissionModel = Depends(get_permission_model),
    principal: Principal = Depends(get_current_principal),
) -> Dict[str, Any]:
    controller = _get_controller_or_404(store, collection)
    _require(permissions, principal, controller.spec.manage_capability)
    try:
        return controller.submit({**draft, "id": record_id})
    except NotFoundError as exc:
        raise not_found(exc) from exc
    except ValidationError as exc:
        raise validation_failed(exc) from exc


@router.delete("/{collection}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_record(
    collection: str,
    record_id: int,
    store: EntityStore = Depends(get_entity_store),
    permissions: PermissionModel = Depends(get_permission_model),
    principal: Principal = Depends(get_current_principal),
) -> Response:
    controller = _get_controller_or_404(store, collection)
    _require(permissions, principal, controller.spec.manage_capability)
    controller.remove(record_id)
    logger.info("record_removed collection=%s id=%s by=%s", collection, record_id, principal.email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
