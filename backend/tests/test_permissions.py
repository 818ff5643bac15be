from __future__ import annotations

import pytest

from infoco.core.errors import CapabilityLockedError
from infoco.core.rbac import (
    PERMISSIONS_KEY,
    ROLE_CAPABILITIES,
    PermissionModel,
    complete_capabilities,
    labelled_rows,
)
from infoco.models.enums import Capability, Role
from infoco.store.state import MemoryStateStore


@pytest.fixture()
def state():
    return MemoryStateStore()


def test_every_role_reads_every_capability(state):
    model = PermissionModel(state)
    for role in Role:
        caps = model.capabilities_for(role)
        assert set(caps) == set(Capability)
        assert caps == ROLE_CAPABILITIES[role]


def test_partial_matrix_reads_missing_cells_as_false():
    state = MemoryStateStore({PERMISSIONS_KEY: {"support": {"canManageTasks": True, "canFly": True}}})
    model = PermissionModel(state)

    support = model.capabilities_for(Role.SUPPORT)
    assert support[Capability.MANAGE_TASKS] is True
    assert sum(support.values()) == 1
    assert not any(model.capabilities_for(Role.DIRECTOR).values())


def test_unknown_role_or_capability_is_denied(state):
    model = PermissionModel(state)
    assert not any(model.capabilities_for("guest").values())
    assert model.allows("guest", Capability.VIEW_DASHBOARD) is False
    assert model.allows(Role.ADMIN, "canFly") is False


@pytest.mark.parametrize(
    "role, capability",
    [
        (Role.ADMIN, Capability.VIEW_DASHBOARD),
        (Role.ADMIN, Capability.MANAGE_SETTINGS),
        (Role.DIRECTOR, Capability.MANAGE_SETTINGS),
        (Role.SUPPORT, Capability.MANAGE_USERS),
    ],
)
def test_locked_cells_reject_edits(state, role, capability):
    model = PermissionModel(state)
    before = model.matrix()

    with pytest.raises(CapabilityLockedError):
        model.set_capability(role, capability, not before[role][capability])

    assert model.is_locked(role, capability)
    assert model.matrix() == before


def test_edit_is_seen_by_every_model_on_the_store(state):
    editor = PermissionModel(state)
    reader = PermissionModel(state)
    assert reader.allows(Role.COORDINATOR, Capability.MANAGE_EMPLOYEES)

    row = editor.set_capability(Role.COORDINATOR, Capability.MANAGE_EMPLOYEES, False)

    assert row[Capability.MANAGE_EMPLOYEES] is False
    assert reader.allows(Role.COORDINATOR, Capability.MANAGE_EMPLOYEES) is False
    assert reader.allows(Role.COORDINATOR, Capability.MANAGE_TASKS) is True
    assert reader.capabilities_for(Role.DIRECTOR) == ROLE_CAPABILITIES[Role.DIRECTOR]


def test_reset_restores_defaults(state):
    model = PermissionModel(state)
    model.set_capability(Role.SUPPORT, Capability.VIEW_REPORTS, True)
    model.reset()
    assert model.matrix() == ROLE_CAPABILITIES


def test_complete_capabilities_drops_unknown_keys():
    row = complete_capabilities({"canViewReports": 1, "bogus": True})
    assert row[Capability.VIEW_REPORTS] is True
    assert "bogus" not in row
    assert len(row) == len(Capability)


def test_labelled_rows_list_locked_columns(state):
    rows = {row["role"]: row for row in labelled_rows(PermissionModel(state))}

    assert rows[Role.ADMIN]["label"] == "Administrador"
    assert set(rows[Role.ADMIN]["locked"]) == set(Capability)
    assert set(rows[Role.DIRECTOR]["locked"]) == {Capability.MANAGE_SETTINGS, Capability.MANAGE_USERS}
