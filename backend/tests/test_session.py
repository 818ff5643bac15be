from __future__ import annotations

import pytest

from infoco.core.errors import AuthenticationError
from infoco.core.session import SessionProvider
from infoco.models.enums import Role
from infoco.store.entities import EntityStore
from infoco.store.state import MemoryStateStore


@pytest.fixture()
def state():
    return MemoryStateStore()


@pytest.fixture()
def entities(state):
    return EntityStore(state)


def test_login_matches_email_case_insensitively(state, entities):
    provider = SessionProvider(state, entities)
    principal = provider.authenticate("  Admin@Infoco.COM ", "admin123")

    assert principal.email == "admin@infoco.com"
    assert principal.role == Role.ADMIN
    assert principal.user_id == 101
    assert provider.session_id
    assert "password_hash" not in principal.model_dump()
    assert provider.current == principal


def test_wrong_password_and_unknown_email_fail_alike(state, entities):
    provider = SessionProvider(state, entities)

    with pytest.raises(AuthenticationError) as wrong_password:
        provider.authenticate("admin@infoco.com", "admin124")
    with pytest.raises(AuthenticationError) as unknown_email:
        provider.authenticate("ninguem@infoco.com", "admin123")

    assert wrong_password.value.message == unknown_email.value.message
    assert wrong_password.value.message == AuthenticationError.DEFAULT_MESSAGE
    assert provider.session_id is None
    assert provider.current is None


def test_session_restores_on_another_provider(state, entities):
    provider = SessionProvider(state, entities)
    principal = provider.authenticate("wendel@gmail.com", "wendel123")

    restored = SessionProvider(state, entities, session_id=provider.session_id).restore_session()
    assert restored == principal


def test_end_session_only_clears_its_own_session(state, entities):
    first = SessionProvider(state, entities)
    first.authenticate("admin@infoco.com", "admin123")
    second = SessionProvider(state, entities)
    second.authenticate("wendel@gmail.com", "wendel123")
    ended = first.session_id

    first.end_session()

    assert first.current is None
    assert SessionProvider(state, entities, session_id=ended).restore_session() is None
    assert second.current.email == "wendel@gmail.com"


def test_end_session_without_session_is_harmless(state, entities):
    provider = SessionProvider(state, entities, session_id="missing")
    provider.end_session()
    assert provider.session_id is None


def test_avatar_outlives_logout(state, entities):
    provider = SessionProvider(state, entities)
    provider.authenticate("fernando@infoco.com", "fernando123")

    updated = provider.update_avatar("data:image/png;base64,iVBORw0KGgo=")
    assert updated.avatar_ref == "data:image/png;base64,iVBORw0KGgo="
    assert provider.current.avatar_ref == updated.avatar_ref

    provider.end_session()
    again = SessionProvider(state, entities).authenticate("fernando@infoco.com", "fernando123")
    assert again.avatar_ref == "data:image/png;base64,iVBORw0KGgo="


def test_avatar_needs_a_session(state, entities):
    with pytest.raises(AuthenticationError):
        SessionProvider(state, entities).update_avatar("data:image/png;base64,AAAA")


def test_active_view_defaults_to_dashboard_and_persists(state, entities):
    provider = SessionProvider(state, entities)
    assert provider.active_view() == "dashboard"

    provider.authenticate("uilber@gmail.com", "uilber123")
    assert provider.active_view() == "dashboard"
    provider.set_active_view("finance")

    assert SessionProvider(state, entities, session_id=provider.session_id).active_view() == "finance"
