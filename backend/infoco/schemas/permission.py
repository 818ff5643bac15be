from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel

from infoco.models.enums import Capability, Role


class CapabilityLabel(BaseModel):
    capability: Capability
    label: str


class PermissionRow(BaseModel):
    role: Role
    label: str
    capabilities: Dict[Capability, bool]
    locked: List[Capability]


class PermissionMatrix(BaseModel):
    capabilities: List[CapabilityLabel]
    roles: List[PermissionRow]


class CapabilityUpdate(BaseModel):
    value: bool
