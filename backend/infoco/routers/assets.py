from __future__ import annotations

from fastapi import APIRouter, Depends, status

from infoco.core.deps import get_entity_store, require_capability
from infoco.core.errors import NotFoundError
from infoco.models.enums import Capability
from infoco.schemas.asset import Asset, MaintenanceRecordCreate
from infoco.schemas.user import Principal
from infoco.services.assets import add_maintenance_record
from infoco.shared.contracts import API_PREFIXES
from infoco.shared.http import not_found
from infoco.store.entities import EntityStore

router = APIRouter(prefix=API_PREFIXES["assets"], tags=["assets"])


@router.post("/{asset_id}/maintenance", response_model=Asset, status_code=status.HTTP_201_CREATED)
def create_maintenance_record(
    asset_id: int,
    payload: MaintenanceRecordCreate,
    store: EntityStore = Depends(get_entity_store),
    _: Principal = Depends(require_capability(Capability.MANAGE_ASSETS)),
) -> Asset:
    try:
        asset = add_maintenance_record(store, asset_id, payload.model_dump(mode="json"))
    except NotFoundError as exc:
        raise not_found(exc, "Asset") from exc
    return Asset.model_validate(asset)
