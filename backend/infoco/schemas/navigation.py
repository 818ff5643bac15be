from __future__ import annotations

from typing import List

from pydantic import BaseModel

from infoco.models.enums import Capability


class MenuItem(BaseModel):
    id: str
    label: str
    capability: Capability
    children: List["MenuItem"] = []


class ViewSelect(BaseModel):
    view: str


class NavigationState(BaseModel):
    requested: str
    active: str
    authorized: bool


MenuItem.model_rebuild()
