from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional

from infoco.core.errors import CapabilityLockedError
from infoco.models.enums import Capability, Role
from infoco.store.state import StateStore

logger = logging.getLogger("security")

PERMISSIONS_KEY = "infoco_permissions"


ROLE_LABELS: dict[Role, str] = {
    Role.ADMIN: "Administrador",
    Role.DIRECTOR: "Diretor",
    Role.COORDINATOR: "Coordenador",
    Role.SUPPORT: "Suporte",
}

CAPABILITY_LABELS: dict[Capability, str] = {
    Capability.VIEW_DASHBOARD: "Visualizar Dashboard",
    Capability.MANAGE_DOCUMENTS: "Gerenciar Base de Dados",
    Capability.MANAGE_EMPLOYEES: "Gerenciar Funcionários",
    Capability.MANAGE_TASKS: "Gerenciar Tarefas",
    Capability.MANAGE_FINANCE: "Gerenciar Financeiro e Municípios",
    Capability.MANAGE_NOTES: "Gerenciar Notas de Pagamento",
    Capability.MANAGE_HR: "Gerenciar Recursos Humanos",
    Capability.VIEW_REPORTS: "Visualizar Relatórios",
    Capability.MANAGE_INTERNAL_EXPENSES: "Gerenciar ADM Infoco",
    Capability.MANAGE_ASSETS: "Gerenciar Patrimônio",
    Capability.MANAGE_SETTINGS: "Acessar Configurações",
    Capability.MANAGE_USERS: "Gerenciar Usuários",
    Capability.POST_UPDATES: "Publicar Atualizações",
}

ROLE_CAPABILITIES: dict[Role, Dict[Capability, bool]] = {
    Role.ADMIN: {capability: True for capability in Capability},
    Role.DIRECTOR: {
        Capability.VIEW_DASHBOARD: True,
        Capability.MANAGE_DOCUMENTS: True,
        Capability.MANAGE_EMPLOYEES: True,
        Capability.MANAGE_TASKS: True,
        Capability.MANAGE_FINANCE: True,
        Capability.MANAGE_NOTES: True,
        Capability.MANAGE_HR: True,
        Capability.VIEW_REPORTS: True,
        Capability.MANAGE_INTERNAL_EXPENSES: True,
        Capability.MANAGE_ASSETS: True,
        Capability.MANAGE_SETTINGS: False,
        Capability.MANAGE_USERS: False,
        Capability.POST_UPDATES: False,
    },
    Role.COORDINATOR: {
        Capability.VIEW_DASHBOARD: True,
        Capability.MANAGE_DOCUMENTS: False,
        Capability.MANAGE_EMPLOYEES: True,
        Capability.MANAGE_TASKS: True,
        Capability.MANAGE_FINANCE: False,
        Capability.MANAGE_NOTES: False,
        Capability.MANAGE_HR: True,
        Capability.VIEW_REPORTS: True,
        Capability.MANAGE_INTERNAL_EXPENSES: False,
        Capability.MANAGE_ASSETS: False,
        Capability.MANAGE_SETTINGS: False,
        Capability.MANAGE_USERS: False,
        Capability.POST_UPDATES: False,
    },
    Role.SUPPORT: {
        Capability.VIEW_DASHBOARD: True,
        Capability.MANAGE_DOCUMENTS: False,
        Capability.MANAGE_EMPLOYEES: False,
        Capability.MANAGE_TASKS: True,
        Capability.MANAGE_FINANCE: False,
        Capability.MANAGE_NOTES: False,
        Capability.MANAGE_HR: False,
        Capability.VIEW_REPORTS: False,
        Capability.MANAGE_INTERNAL_EXPENSES: False,
        Capability.MANAGE_ASSETS: False,
        Capability.MANAGE_SETTINGS: False,
        Capability.MANAGE_USERS: False,
        Capability.POST_UPDATES: False,
    },
}

# Fixed for every caller: the whole admin row plus these columns on every row.
LOCKED_ROLES: frozenset[Role] = frozenset({Role.ADMIN})
LOCKED_CAPABILITIES: frozenset[Capability] = frozenset(
    {Capability.MANAGE_SETTINGS, Capability.MANAGE_USERS}
)


def _coerce_role(value: Role | str | None) -> Optional[Role]:
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value))
    except ValueError:
        return None


def _coerce_capability(value: Capability | str | None) -> Optional[Capability]:
    if value is None:
        return None
    if isinstance(value, Capability):
        return value
    try:
        return Capability(str(value))
    except ValueError:
        return None


def complete_capabilities(raw: Optional[Mapping[str, object]]) -> Dict[Capability, bool]:
    """Return a row with every capability present; unknown keys are dropped, gaps read as False."""
    row: Dict[Capability, bool] = {capability: False for capability in Capability}
    if not raw:
        return row
    for key, value in raw.items():
        capability = _coerce_capability(key)
        if capability is None:
            continue
        row[capability] = bool(value)
    return row


def is_locked(role: Role | str, capability: Capability | str) -> bool:
    role_value = _coerce_role(role)
    capability_value = _coerce_capability(capability)
    return role_value in LOCKED_ROLES or capability_value in LOCKED_CAPABILITIES


class PermissionModel:
    """Capability matrix backed by a state store.

    The matrix is read on every call so edits made through one instance are
    seen by every other instance sharing the store.
    """

    def __init__(self, store: StateStore, key: str = PERMISSIONS_KEY) -> None:
        self.store = store
        self.key = key

    def _raw(self) -> Dict[str, Dict[str, bool]]:
        default = {
            role.value: {cap.value: value for cap, value in caps.items()}
            for role, caps in ROLE_CAPABILITIES.items()
        }
        raw = self.store.read(self.key, default)
        return raw if isinstance(raw, dict) else default

    def matrix(self) -> Dict[Role, Dict[Capability, bool]]:
        raw = self._raw()
        return {role: complete_capabilities(raw.get(role.value)) for role in Role}

    def capabilities_for(self, role: Role | str) -> Dict[Capability, bool]:
        role_value = _coerce_role(role)
        if role_value is None:
            return complete_capabilities(None)
        return complete_capabilities(self._raw().get(role_value.value))

    def allows(self, role: Role | str, capability: Capability | str) -> bool:
        capability_value = _coerce_capability(capability)
        if capability_value is None:
            return False
        return self.capabilities_for(role)[capability_value]

    def is_locked(self, role: Role | str, capability: Capability | str) -> bool:
        return is_locked(role, capability)

    def set_capability(self, role: Role | str, capability: Capability | str, value: bool) -> Dict[Capability, bool]:
        role_value = _coerce_role(role)
        capability_value = _coerce_capability(capability)
        if role_value is None or capability_value is None:
            raise CapabilityLockedError(str(role), str(capability))
        if is_locked(role_value, capability_value):
            logger.info(
                "capability_edit_rejected role=%s capability=%s",
                role_value.value,
                capability_value.value,
            )
            raise CapabilityLockedError(role_value.value, capability_value.value)

        raw = self._raw()
        row = {cap.value: flag for cap, flag in complete_capabilities(raw.get(role_value.value)).items()}
        row[capability_value.value] = bool(value)
        raw[role_value.value] = row
        self.store.write(self.key, raw)
        logger.info(
            "capability_updated role=%s capability=%s value=%s",
            role_value.value,
            capability_value.value,
            bool(value),
        )
        return complete_capabilities(row)

    def reset(self) -> None:
        self.store.delete(self.key)


def labelled_rows(model: PermissionModel, roles: Iterable[Role] | None = None) -> list[dict]:
    selected = list(roles) if roles is not None else list(Role)
    rows = []
    for role in selected:
        caps = model.capabilities_for(role)
        rows.append(
            {
                "role": role,
                "label": ROLE_LABELS[role],
                "capabilities": caps,
                "locked": [cap for cap in Capability if is_locked(role, cap)],
            }
        )
    return rows
