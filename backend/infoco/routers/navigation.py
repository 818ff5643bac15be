from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from infoco.core.deps import get_navigation_gate, get_session_provider
from infoco.core.navigation import NavigationGate, Resolution
from infoco.core.session import SessionProvider
from infoco.schemas.navigation import MenuItem, NavigationState, ViewSelect
from infoco.shared.contracts import API_PREFIXES

router = APIRouter(prefix=API_PREFIXES["navigation"], tags=["navigation"])


def _state(resolution: Resolution) -> NavigationState:
    return NavigationState(
        requested=resolution.requested,
        active=resolution.active,
        authorized=resolution.authorized,
    )


@router.get("/menu", response_model=List[MenuItem])
def read_menu(gate: NavigationGate = Depends(get_navigation_gate)) -> List[MenuItem]:
    return [MenuItem.model_validate(item) for item in gate.menu()]


@router.get("/current", response_model=NavigationState)
def read_current(
    gate: NavigationGate = Depends(get_navigation_gate),
    provider: SessionProvider = Depends(get_session_provider),
) -> NavigationState:
    resolution = gate.current()
    if resolution.active != resolution.requested:
        provider.set_active_view(resolution.active)
    return _state(resolution)


@router.post("/select", response_model=NavigationState)
def select_view(
    payload: ViewSelect,
    gate: NavigationGate = Depends(get_navigation_gate),
    provider: SessionProvider = Depends(get_session_provider),
) -> NavigationState:
    resolution = gate.select(payload.view)
    provider.set_active_view(resolution.active)
    return _state(resolution)
