from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as SchemaValidationError

from infoco.core.errors import NotFoundError, ValidationError
from infoco.core.security import get_password_hash
from infoco.store.collections import LABEL_FIELDS, SENTINELS, UNKNOWN_LABEL, CollectionSpec, get_spec
from infoco.store.entities import EntityStore

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def resolve(store: EntityStore, record_id: Any, collection: str) -> str:
    """Display label for a foreign id; a fixed sentinel when it dangles."""
    sentinel = SENTINELS.get(collection, UNKNOWN_LABEL)
    if record_id is None or not store.has(collection):
        return sentinel
    record = store.collection(collection).get(record_id)
    if record is None:
        return sentinel
    label = record.get(LABEL_FIELDS.get(collection, "name"))
    return str(label) if label else sentinel


class RecordTableController:
    """List/add/edit/delete over a single collection.

    Drafts are plain dicts. A draft without ``id`` creates a record; a draft
    with one replaces that record in place.
    """

    hidden_fields: tuple[str, ...] = ()

    def __init__(self, store: EntityStore, spec: CollectionSpec | str) -> None:
        self.store = store
        self.spec = get_spec(spec) if isinstance(spec, str) else spec
        self.collection = store.collection(self.spec.name)

    def _public(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in record.items() if key not in self.hidden_fields}

    def list(self) -> List[Dict[str, Any]]:
        return [self._public(record) for record in self.collection.all()]

    def rows(self) -> List[Dict[str, Any]]:
        """Records with their foreign ids rendered as labels."""
        rows = []
        for record in self.list():
            labels = {ref.field: self.resolve(record.get(ref.field), ref.target) for ref in self.spec.references}
            rows.append({**record, "labels": labels})
        return rows

    def get(self, record_id: int) -> Dict[str, Any]:
        return self._public(self.collection.require(record_id))

    def begin_create(self) -> Dict[str, Any]:
        return self.spec.draft_defaults()

    def begin_edit(self, record_id: int) -> Dict[str, Any]:
        return dict(self.get(record_id))

    def missing_fields(self, candidate: Dict[str, Any], existing: Optional[Dict[str, Any]]) -> List[str]:
        return [name for name in self.spec.required if _is_blank(candidate.get(name))]

    def prepare(self, candidate: Dict[str, Any], existing: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return candidate

    def submit(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(draft)
        record_id = values.pop("id", None)
        existing = None
        if record_id is not None:
            existing = self.collection.require(record_id)

        base = dict(existing) if existing is not None else self.spec.draft_defaults()
        candidate = {**base, **values}

        missing = self.missing_fields(candidate, existing)
        if missing:
            raise ValidationError(missing)

        candidate = self.prepare(candidate, existing)
        candidate["id"] = record_id if record_id is not None else 0
        try:
            record = self.spec.normalize(candidate)
        except SchemaValidationError as exc:
            fields = [str(error["loc"][0]) for error in exc.errors() if error.get("loc")]
            raise ValidationError(fields or ["__root__"]) from exc

        if existing is None:
            record.pop("id", None)
            created = self.collection.insert(record, prepend=self.spec.prepend)
            return self._public(created)
        return self._public(self.collection.replace(record))

    def remove(self, record_id: int) -> None:
        self.collection.remove(record_id)

    def resolve(self, record_id: Any, collection: str) -> str:
        return resolve(self.store, record_id, collection)


class CredentialTableController(RecordTableController):
    """System users: hashes passwords and keeps emails unique."""

    hidden_fields = ("password_hash",)

    def begin_edit(self, record_id: int) -> Dict[str, Any]:
        draft = super().begin_edit(record_id)
        draft["password"] = ""
        return draft

    def missing_fields(self, candidate: Dict[str, Any], existing: Optional[Dict[str, Any]]) -> List[str]:
        missing = super().missing_fields(candidate, existing)
        if existing is None and _is_blank(candidate.get("password")):
            missing.append("password")
        return missing

    def prepare(self, candidate: Dict[str, Any], existing: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        email = str(candidate.get("email", "")).strip()
        own_id = existing.get("id") if existing else None
        for user in self.collection.all():
            if user.get("id") != own_id and str(user.get("email", "")).strip().lower() == email.lower():
                raise ValidationError(["email"], "E-mail já cadastrado.")

        password = candidate.pop("password", None)
        if not _is_blank(password):
            candidate["password_hash"] = get_password_hash(password)
            if existing is not None:
                logger.info("password_changed user_id=%s", existing.get("id"))
        return candidate


class UpdatePostController(RecordTableController):
    """Update posts keep their creation time across edits."""

    def prepare(self, candidate: Dict[str, Any], existing: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if existing is None or not existing.get("created_at"):
            candidate["created_at"] = datetime.now(timezone.utc).isoformat()
        else:
            candidate["created_at"] = existing["created_at"]
        return candidate


_CONTROLLERS = {
    "system_users": CredentialTableController,
    "update_posts": UpdatePostController,
}


def controller_for(store: EntityStore, name: str) -> RecordTableController:
    spec = get_spec(name)
    controller_cls = _CONTROLLERS.get(name, RecordTableController)
    return controller_cls(store, spec)
