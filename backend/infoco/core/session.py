"""Session and identity provider.

One principal per session. Sessions live in the state store under an opaque
session id so any request carrying that id can restore them; avatars are kept
apart, keyed by email, so they outlive logout.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from infoco.core.errors import AuthenticationError
from infoco.core.security import new_session_id, verify_password
from infoco.schemas.user import Principal
from infoco.store.entities import EntityStore
from infoco.store.state import StateStore

logger = logging.getLogger("security")

SESSIONS_KEY = "infoco_sessions"
AVATARS_KEY = "infoco_user_pfp"
DEFAULT_VIEW = "dashboard"


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class SessionProvider:
    def __init__(self, store: StateStore, entities: EntityStore, session_id: Optional[str] = None) -> None:
        self.store = store
        self.entities = entities
        self.session_id = session_id

    def _sessions(self) -> Dict[str, Dict[str, Any]]:
        return self.store.read(SESSIONS_KEY, {}) or {}

    def _avatars(self) -> Dict[str, str]:
        return self.store.read(AVATARS_KEY, {}) or {}

    def _record(self) -> Optional[Dict[str, Any]]:
        if not self.session_id:
            return None
        return self._sessions().get(self.session_id)

    def _save_record(self, record: Dict[str, Any]) -> None:
        sessions = self._sessions()
        sessions[self.session_id] = record
        self.store.write(SESSIONS_KEY, sessions)

    def authenticate(self, email: str, password: str) -> Principal:
        wanted = _normalize_email(email)
        users = self.entities.collection("system_users").all()
        user = next((u for u in users if _normalize_email(u.get("email", "")) == wanted), None)
        if user is None or not verify_password(password or "", user.get("password_hash", "")):
            logger.info("login_failed email=%s", wanted)
            raise AuthenticationError()

        principal = Principal(
            email=user["email"],
            display_name=user["display_name"],
            role=user["role"],
            department=user["department"],
            avatar_ref=self._avatars().get(user["email"]),
            user_id=user["id"],
        )
        self.session_id = new_session_id()
        self._save_record(
            {
                "principal": principal.model_dump(mode="json"),
                "active_view": DEFAULT_VIEW,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        logger.info("login_success email=%s role=%s", principal.email, principal.role.value)
        return principal

    def restore_session(self) -> Optional[Principal]:
        """Rehydrate the stored principal without re-checking credentials."""
        record = self._record()
        if record is None:
            return None
        principal = Principal.model_validate(record["principal"])
        if principal.avatar_ref is None:
            avatar = self._avatars().get(principal.email)
            if avatar:
                principal = principal.model_copy(update={"avatar_ref": avatar})
        return principal

    @property
    def current(self) -> Optional[Principal]:
        return self.restore_session()

    def end_session(self) -> None:
        sessions = self._sessions()
        if self.session_id and sessions.pop(self.session_id, None) is not None:
            self.store.write(SESSIONS_KEY, sessions)
            logger.info("logout session=%s", self.session_id[:8])
        self.session_id = None

    def update_avatar(self, avatar_ref: str) -> Principal:
        record = self._record()
        if record is None:
            raise AuthenticationError("Nenhuma sessão ativa.")
        principal = Principal.model_validate(record["principal"]).model_copy(update={"avatar_ref": avatar_ref})
        record["principal"] = principal.model_dump(mode="json")
        self._save_record(record)

        avatars = self._avatars()
        avatars[principal.email] = avatar_ref
        self.store.write(AVATARS_KEY, avatars)
        return principal

    def active_view(self) -> str:
        record = self._record()
        if record is None:
            return DEFAULT_VIEW
        return record.get("active_view") or DEFAULT_VIEW

    def set_active_view(self, view_id: str) -> None:
        record = self._record()
        if record is None:
            return
        record["active_view"] = view_id
        self._save_record(record)
