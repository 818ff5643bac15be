"""Municipality document folders and payment notes.

Both are nested maps rather than flat lists, so they live outside the record
registry but use the same state store and id counters.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from infoco.core.errors import ValidationError
from infoco.schemas.document import DOCUMENT_FOLDERS
from infoco.store.entities import EntityStore

logger = logging.getLogger(__name__)

DOCUMENTS_KEY = "infoco_documents"
PAYMENT_NOTES_KEY = "infoco_payment_notes"


def _require_folder(folder: str) -> None:
    if folder not in DOCUMENT_FOLDERS:
        raise ValidationError(["folder"], f"Pasta desconhecida: {folder}")


def _documents(store: EntityStore) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    return store.state.read(DOCUMENTS_KEY, {}) or {}


def municipality_folders(store: EntityStore, municipality: str) -> Dict[str, List[Dict[str, Any]]]:
    stored = _documents(store).get(municipality, {})
    return {folder: list(stored.get(folder, [])) for folder in DOCUMENT_FOLDERS}


def list_files(store: EntityStore, municipality: str, folder: str) -> List[Dict[str, Any]]:
    _require_folder(folder)
    return list(_documents(store).get(municipality, {}).get(folder, []))


def add_file(store: EntityStore, municipality: str, folder: str, file: Dict[str, Any]) -> Dict[str, Any]:
    _require_folder(folder)
    documents = _documents(store)
    files = documents.setdefault(municipality, {}).setdefault(folder, [])
    created = {**file, "id": store.sequence.next_id("documents")}
    files.append(created)
    store.state.write(DOCUMENTS_KEY, documents)
    logger.info("document_added municipality=%s folder=%s id=%s", municipality, folder, created["id"])
    return created


def delete_file(store: EntityStore, municipality: str, folder: str, file_id: int) -> None:
    _require_folder(folder)
    documents = _documents(store)
    files = documents.get(municipality, {}).get(folder)
    if not files:
        return
    documents[municipality][folder] = [f for f in files if f.get("id") != file_id]
    store.state.write(DOCUMENTS_KEY, documents)


def _payment_notes(store: EntityStore) -> Dict[str, List[Dict[str, Any]]]:
    return store.state.read(PAYMENT_NOTES_KEY, {}) or {}


def list_payment_notes(store: EntityStore, municipality: str) -> List[Dict[str, Any]]:
    return list(_payment_notes(store).get(municipality, []))


def add_payment_note(store: EntityStore, municipality: str, note: Dict[str, Any]) -> Dict[str, Any]:
    notes = _payment_notes(store)
    file = {**note["file"], "id": store.sequence.next_id("documents")}
    created = {
        **note,
        "file": file,
        "id": store.sequence.next_id("payment_notes"),
        "upload_date": datetime.now(timezone.utc).isoformat(),
    }
    notes.setdefault(municipality, []).insert(0, created)
    store.state.write(PAYMENT_NOTES_KEY, notes)
    logger.info("payment_note_added municipality=%s id=%s", municipality, created["id"])
    return created


def delete_payment_note(store: EntityStore, municipality: str, note_id: int) -> None:
    notes = _payment_notes(store)
    existing = notes.get(municipality)
    if not existing:
        return
    notes[municipality] = [n for n in existing if n.get("id") != note_id]
    store.state.write(PAYMENT_NOTES_KEY, notes)

