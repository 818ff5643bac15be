from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator

from infoco.models.enums import Role
from infoco.schemas.base import Record


class SystemUser(Record):
    """Credential record as stored. ``password_hash`` never leaves the server."""

    email: str
    display_name: str
    role: Role
    department: str
    password_hash: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        if not local.strip() or not domain.strip():
            raise ValueError("Invalid email address")
        return value.strip()


class Principal(BaseModel):
    """Password-stripped projection of a credential record held by a session."""

    email: str
    display_name: str
    role: Role
    department: str
    avatar_ref: Optional[str] = None
    user_id: Optional[int] = None
