from __future__ import annotations

from typing import Any, Dict

from infoco.store.entities import EntityStore, max_id


def add_maintenance_record(store: EntityStore, asset_id: int, entry: Dict[str, Any]) -> Dict[str, Any]:
    assets = store.collection("assets")
    asset = assets.require(asset_id)
    log = list(asset.get("maintenance_log") or [])
    # One counter for every asset log; never below the ids already in this log.
    entry_id = store.sequence.next_id("maintenance_log", floor=max_id(log))
    log.append({**entry, "id": entry_id})
    asset["maintenance_log"] = log
    return assets.replace(asset)
