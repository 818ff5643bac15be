from __future__ import annotations

import json
import logging
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from infoco.core.navigation import NavigationGate
from infoco.core.rbac import PermissionModel
from infoco.core.security import decode_token
from infoco.core.session import SessionProvider
from infoco.core.settings import settings
from infoco.db.session import get_db
from infoco.models.enums import Capability
from infoco.schemas.user import Principal
from infoco.store.entities import EntityStore
from infoco.store.state import SqlStateStore, StateStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)
logger = logging.getLogger("security")


def log_auth_event(event: str, *, request: Request, extra: Optional[dict] = None) -> None:
    payload = {
        "event": event,
        "request_id": request.headers.get("x-request-id"),
        "path": request.url.path,
        "method": request.method,
        "client": request.client.host if request.client else None,
    }
    if extra:
        payload.update(extra)
    logger.info(json.dumps(payload, default=str))


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_state_store(db: Session = Depends(get_db)) -> StateStore:
    return SqlStateStore(db)


def get_entity_store(state: StateStore = Depends(get_state_store)) -> EntityStore:
    return EntityStore(state, seed_defaults=settings.seed_defaults)


def get_permission_model(state: StateStore = Depends(get_state_store)) -> PermissionModel:
    return PermissionModel(state)


def get_anonymous_session(
    state: StateStore = Depends(get_state_store),
    entities: EntityStore = Depends(get_entity_store),
) -> SessionProvider:
    return SessionProvider(state, entities)


def get_session_provider(
    request: Request,
    token: Optional[str] = Security(oauth2_scheme),
    state: StateStore = Depends(get_state_store),
    entities: EntityStore = Depends(get_entity_store),
) -> SessionProvider:
    if not token:
        raise _credentials_exception("Not authenticated")
    try:
        payload = decode_token(token)
        session_id = payload.get("sid")
        if not session_id:
            log_auth_event("token_missing_sid", request=request)
            raise _credentials_exception()
    except JWTError:
        log_auth_event("token_invalid", request=request)
        raise _credentials_exception()
    return SessionProvider(state, entities, session_id=session_id)


def get_current_principal(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
) -> Principal:
    principal = provider.restore_session()
    if principal is None:
        log_auth_event("session_missing", request=request)
        raise _credentials_exception("session_expired")
    return principal


def require_capability(capability: Capability) -> Callable[..., Principal]:
    """Dependency factory: 403 unless the principal's role holds ``capability`` right now."""

    def _dependency(
        request: Request,
        principal: Principal = Depends(get_current_principal),
        permissions: PermissionModel = Depends(get_permission_model),
    ) -> Principal:
        if not permissions.allows(principal.role, capability):
            log_auth_event(
                "capability_denied",
                request=request,
                extra={"email": principal.email, "role": principal.role.value, "capability": capability.value},
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorised for this action")
        return principal

    return _dependency


def get_navigation_gate(
    provider: SessionProvider = Depends(get_session_provider),
    principal: Principal = Depends(get_current_principal),
    permissions: PermissionModel = Depends(get_permission_model),
) -> NavigationGate:
    return NavigationGate(permissions, principal.role, provider.active_view())
