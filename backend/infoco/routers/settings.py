from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from infoco.core.deps import get_state_store, require_capability
from infoco.core.settings import settings
from infoco.models.enums import Capability
from infoco.schemas.setting import LoginImage
from infoco.schemas.user import Principal
from infoco.shared.contracts import API_PREFIXES
from infoco.store.state import StateStore

router = APIRouter(prefix=API_PREFIXES["settings"], tags=["settings"])

LOGIN_IMAGE_KEY = "infoco_login_image"


@router.get("/login-image", response_model=LoginImage)
def read_login_image(state: StateStore = Depends(get_state_store)) -> LoginImage:
    return LoginImage(image_url=state.read(LOGIN_IMAGE_KEY))


@router.put("/login-image", response_model=LoginImage)
def update_login_image(
    payload: LoginImage,
    state: StateStore = Depends(get_state_store),
    _: Principal = Depends(require_capability(Capability.MANAGE_SETTINGS)),
) -> LoginImage:
    if payload.image_url and len(payload.image_url) > settings.max_image_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Imagem maior que {settings.max_image_size_mb}MB",
        )
    if payload.image_url:
        state.write(LOGIN_IMAGE_KEY, payload.image_url)
    else:
        state.delete(LOGIN_IMAGE_KEY)
    return LoginImage(image_url=payload.image_url or None)
