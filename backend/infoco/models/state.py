from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from infoco.db.base import Base, TimestampMixin


class StateEntry(TimestampMixin, Base):
    """One persisted key. ``value`` always holds the whole collection."""

    __tablename__ = "app_state"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
