"""Whole-value key/value persistence.

Every key holds an entire JSON-serialisable collection; ``write`` replaces the
stored value outright. There are no partial or delta writes.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from infoco.models.state import StateEntry

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    def read(self, key: str, default: Any = None) -> Any: ...

    def write(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemoryStateStore:
    """Process-local store. Values are deep-copied in and out like a serialised mirror."""

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def read(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return copy.deepcopy(default)
        return copy.deepcopy(self._data[key])

    def write(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._data)


class SqlStateStore:
    """State mirrored into the ``app_state`` table, one row per key."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def read(self, key: str, default: Any = None) -> Any:
        entry = self.db.get(StateEntry, key)
        if entry is None:
            return copy.deepcopy(default)
        return copy.deepcopy(entry.value)

    def write(self, key: str, value: Any) -> None:
        entry = self.db.get(StateEntry, key)
        # Stored values never alias the caller's object; reassignment flags the JSON column dirty.
        if entry is None:
            self.db.add(StateEntry(key=key, value=copy.deepcopy(value)))
        else:
            entry.value = copy.deepcopy(value)
        self.db.commit()
        logger.debug("state_write key=%s", key)

    def delete(self, key: str) -> None:
        entry = self.db.get(StateEntry, key)
        if entry is None:
            return
        self.db.delete(entry)
        self.db.commit()

    def keys(self) -> List[str]:
        return list(self.db.scalars(select(StateEntry.key).order_by(StateEntry.key)))
