from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from infoco.core.errors import NotFoundError
from infoco.store.state import StateStore

logger = logging.getLogger(__name__)

SEQUENCES_KEY = "infoco_sequences"


class SequenceAllocator:
    """Monotonic id counters, one per collection, persisted next to the data.

    A counter never goes below the largest id already present, so seeded or
    imported records are never collided with.
    """

    def __init__(self, store: StateStore, key: str = SEQUENCES_KEY) -> None:
        self.store = store
        self.key = key

    def next_id(self, name: str, floor: int = 0) -> int:
        counters = self.store.read(self.key, {}) or {}
        current = max(int(counters.get(name, 0)), int(floor))
        allocated = current + 1
        counters[name] = allocated
        self.store.write(self.key, counters)
        return allocated


def max_id(records: Iterable[Dict[str, Any]]) -> int:
    return max((int(record.get("id") or 0) for record in records), default=0)


class EntityCollection:
    """Ordered list of records under one state key.

    Reads fall back to ``default_factory`` when the key was never written; the
    default is materialised by the first write.
    """

    def __init__(
        self,
        store: StateStore,
        name: str,
        key: str,
        *,
        sequence: SequenceAllocator,
        default_factory: Optional[Callable[[], List[Dict[str, Any]]]] = None,
    ) -> None:
        self.store = store
        self.name = name
        self.key = key
        self.sequence = sequence
        self.default_factory = default_factory

    def _default(self) -> List[Dict[str, Any]]:
        return self.default_factory() if self.default_factory else []

    def all(self) -> List[Dict[str, Any]]:
        records = self.store.read(self.key)
        if records is None:
            return self._default()
        return list(records)

    def save_all(self, records: List[Dict[str, Any]]) -> None:
        self.store.write(self.key, records)

    def get(self, record_id: int) -> Optional[Dict[str, Any]]:
        for record in self.all():
            if record.get("id") == record_id:
                return record
        return None

    def require(self, record_id: int) -> Dict[str, Any]:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(self.name, record_id)
        return record

    def new_id(self, records: Optional[List[Dict[str, Any]]] = None) -> int:
        existing = records if records is not None else self.all()
        return self.sequence.next_id(self.name, floor=max_id(existing))

    def insert(self, record: Dict[str, Any], *, prepend: bool = False) -> Dict[str, Any]:
        records = self.all()
        created = dict(record)
        created["id"] = self.new_id(records)
        if prepend:
            records.insert(0, created)
        else:
            records.append(created)
        self.save_all(records)
        logger.info("record_created collection=%s id=%s", self.name, created["id"])
        return created

    def replace(self, record: Dict[str, Any]) -> Dict[str, Any]:
        records = self.all()
        record_id = record.get("id")
        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                records[index] = dict(record)
                self.save_all(records)
                logger.info("record_updated collection=%s id=%s", self.name, record_id)
                return records[index]
        raise NotFoundError(self.name, record_id)

    def remove(self, record_id: int) -> bool:
        records = self.all()
        remaining = [record for record in records if record.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self.save_all(remaining)
        logger.info("record_deleted collection=%s id=%s", self.name, record_id)
        return True


class EntityStore:
    """Owner of every entity collection, keyed by collection name."""

    def __init__(self, state: StateStore, *, seed_defaults: bool = True) -> None:
        # Imported here to keep the registry free to import schemas and services.
        from infoco.store.collections import COLLECTIONS

        self.state = state
        self.seed_defaults = seed_defaults
        self.sequence = SequenceAllocator(state)
        self._specs = COLLECTIONS
        self._collections: Dict[str, EntityCollection] = {}

    def names(self) -> List[str]:
        return list(self._specs)

    def has(self, name: str) -> bool:
        return name in self._specs

    def collection(self, name: str) -> EntityCollection:
        if name not in self._collections:
            spec = self._specs.get(name)
            if spec is None:
                raise KeyError(name)
            self._collections[name] = EntityCollection(
                self.state,
                spec.name,
                spec.key,
                sequence=self.sequence,
                default_factory=spec.seed_records if self.seed_defaults else None,
            )
        return self._collections[name]
