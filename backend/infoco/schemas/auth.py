from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field

from infoco.models.enums import Capability
from infoco.schemas.user import Principal


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    principal: Principal
    capabilities: Dict[Capability, bool]
    active_view: str


class AvatarUpdate(BaseModel):
    avatar_ref: str = Field(min_length=1)
