from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from infoco.core.errors import NotFoundError
from infoco.store.entities import EntityStore

logger = logging.getLogger(__name__)


def _collection(store: EntityStore):
    return store.collection("notifications")


def list_notifications(store: EntityStore) -> List[Dict[str, Any]]:
    return _collection(store).all()


def unread_count(store: EntityStore) -> int:
    return sum(1 for n in list_notifications(store) if not n.get("read"))


def add_notification(store: EntityStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Store an unread notification stamped now; the list stays newest first."""
    notifications = _collection(store)
    records = notifications.all()
    created = {
        **payload,
        "id": notifications.new_id(records),
        "read": False,
        "date": datetime.now(timezone.utc).isoformat(),
    }
    records.insert(0, created)
    records.sort(key=lambda n: n.get("date") or "", reverse=True)
    notifications.save_all(records)
    logger.info("notification_created id=%s type=%s", created["id"], created.get("type"))
    return created


def mark_read(store: EntityStore, notification_id: int) -> Dict[str, Any]:
    notifications = _collection(store)
    record = notifications.get(notification_id)
    if record is None:
        raise NotFoundError("notifications", notification_id)
    record["read"] = True
    return notifications.replace(record)


def mark_all_read(store: EntityStore) -> int:
    notifications = _collection(store)
    records = notifications.all()
    changed = sum(1 for n in records if not n.get("read"))
    notifications.save_all([{**n, "read": True} for n in records])
    return changed


def delete_notification(store: EntityStore, notification_id: int) -> None:
    _collection(store).remove(notification_id)
