from __future__ import annotations

from infoco.models.enums import ExternalSystemType
from infoco.schemas.base import Record


class ExternalSystem(Record):
    name: str
    type: ExternalSystemType
    api_url: str
    access_token: str
    token_type: str = "Bearer"
