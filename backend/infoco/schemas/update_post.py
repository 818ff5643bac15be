from __future__ import annotations

from datetime import datetime

from infoco.schemas.base import Record


class UpdatePost(Record):
    author_id: int
    content: str
    created_at: datetime
