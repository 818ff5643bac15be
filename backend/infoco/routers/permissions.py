from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from infoco.core.deps import require_capability, get_permission_model
from infoco.core.errors import CapabilityLockedError
from infoco.core.rbac import CAPABILITY_LABELS, PermissionModel, labelled_rows
from infoco.models.enums import Capability, Role
from infoco.schemas.permission import CapabilityUpdate, PermissionMatrix, PermissionRow
from infoco.schemas.user import Principal
from infoco.shared.contracts import API_PREFIXES

router = APIRouter(prefix=API_PREFIXES["permissions"], tags=["permissions"])

# The role matrix lives in the settings screen.
_require_settings = require_capability(Capability.MANAGE_SETTINGS)


def _matrix(model: PermissionModel) -> PermissionMatrix:
    return PermissionMatrix(
        capabilities=[{"capability": cap, "label": label} for cap, label in CAPABILITY_LABELS.items()],
        roles=[PermissionRow(**row) for row in labelled_rows(model)],
    )


@router.get("", response_model=PermissionMatrix)
def read_permissions(
    _: Principal = Depends(_require_settings),
    model: PermissionModel = Depends(get_permission_model),
) -> PermissionMatrix:
    return _matrix(model)


@router.put("/{role}/{capability}", response_model=PermissionRow)
def update_permission(
    role: Role,
    capability: Capability,
    payload: CapabilityUpdate,
    _: Principal = Depends(_require_settings),
    model: PermissionModel = Depends(get_permission_model),
) -> PermissionRow:
    try:
        model.set_capability(role, capability, payload.value)
    except CapabilityLockedError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=exc.message) from exc
    return PermissionRow(**labelled_rows(model, [role])[0])


@router.post("/reset", response_model=PermissionMatrix)
def reset_permissions(
    principal: Principal = Depends(_require_settings),
    model: PermissionModel = Depends(get_permission_model),
) -> PermissionMatrix:
    if principal.role != Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only administrators can reset permissions")
    model.reset()
    return _matrix(model)
