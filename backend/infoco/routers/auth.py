from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from infoco.core.deps import (
    get_anonymous_session,
    get_current_principal,
    get_permission_model,
    get_session_provider,
    log_auth_event,
)
from infoco.core.errors import AuthenticationError
from infoco.core.rbac import PermissionModel
from infoco.core.security import create_access_token
from infoco.core.session import SessionProvider
from infoco.core.settings import settings
from infoco.models.enums import Capability
from infoco.schemas.auth import AvatarUpdate, LoginRequest, LoginResponse
from infoco.schemas.user import Principal
from infoco.shared.contracts import API_PREFIXES

router = APIRouter(prefix=API_PREFIXES["auth"], tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    provider: SessionProvider = Depends(get_anonymous_session),
    permissions: PermissionModel = Depends(get_permission_model),
) -> LoginResponse:
    try:
        principal = provider.authenticate(payload.email, payload.password)
    except AuthenticationError as exc:
        log_auth_event("login_failed", request=request)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc

    token = create_access_token({"sub": principal.email, "email": principal.email, "sid": provider.session_id})
    log_auth_event("login_success", request=request, extra={"email": principal.email})
    return LoginResponse(
        access_token=token,
        principal=principal,
        capabilities=permissions.capabilities_for(principal.role),
        active_view=provider.active_view(),
    )


@router.post("/logout")
def logout(provider: SessionProvider = Depends(get_session_provider)) -> dict:
    provider.end_session()
    return {"status": "ok"}


@router.get("/me", response_model=Principal)
def read_me(principal: Principal = Depends(get_current_principal)) -> Principal:
    return principal


@router.get("/capabilities", response_model=Dict[Capability, bool])
def read_capabilities(
    principal: Principal = Depends(get_current_principal),
    permissions: PermissionModel = Depends(get_permission_model),
) -> Dict[Capability, bool]:
    return permissions.capabilities_for(principal.role)


@router.put("/avatar", response_model=Principal)
def update_avatar(
    payload: AvatarUpdate,
    provider: SessionProvider = Depends(get_session_provider),
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if len(payload.avatar_ref) > settings.max_image_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Imagem maior que {settings.max_image_size_mb}MB",
        )
    return provider.update_avatar(payload.avatar_ref)
