"""Navigation authorization gate.

Maps view ids to the capability they require and keeps the active view of a
session pointing somewhere the role may go. Denial is silent: the gate falls
back to the dashboard instead of raising.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from infoco.core.rbac import PermissionModel
from infoco.models.enums import Capability, Role

logger = logging.getLogger("security")

DEFAULT_VIEW = "dashboard"


@dataclass(frozen=True)
class ViewDescriptor:
    id: str
    label: str
    required_capability: Capability
    group: Optional[str] = None
    in_menu: bool = True


@dataclass(frozen=True)
class MenuGroup:
    id: str
    label: str


MENU_GROUPS: Dict[str, MenuGroup] = {
    "organs": MenuGroup(id="organs", label="Órgãos"),
}

VIEW_REGISTRY: Tuple[ViewDescriptor, ...] = (
    ViewDescriptor("dashboard", "Dashboard", Capability.VIEW_DASHBOARD),
    ViewDescriptor("updates-feed", "Notas de Atualização", Capability.VIEW_DASHBOARD),
    ViewDescriptor("database", "Base de Dados", Capability.MANAGE_DOCUMENTS, group="organs"),
    ViewDescriptor("employees", "Funcionários", Capability.MANAGE_EMPLOYEES),
    ViewDescriptor("tasks", "Tarefas", Capability.MANAGE_TASKS),
    ViewDescriptor("finance", "Financeiro", Capability.MANAGE_FINANCE),
    ViewDescriptor("notes", "Gestão de Notas", Capability.MANAGE_NOTES),
    ViewDescriptor("hr", "Recursos Humanos", Capability.MANAGE_HR),
    ViewDescriptor("internal-expenses", "ADM Infoco", Capability.MANAGE_INTERNAL_EXPENSES),
    ViewDescriptor("assets", "Patrimônio", Capability.MANAGE_ASSETS),
    ViewDescriptor("municipalities", "Municípios", Capability.MANAGE_FINANCE),
    ViewDescriptor("reports", "Relatórios", Capability.VIEW_REPORTS),
    ViewDescriptor("users", "Usuários", Capability.MANAGE_USERS),
    # Reached from the header, not the sidebar.
    ViewDescriptor("settings", "Configurações", Capability.MANAGE_SETTINGS, in_menu=False),
)

_VIEWS_BY_ID: Dict[str, ViewDescriptor] = {view.id: view for view in VIEW_REGISTRY}


def get_view(view_id: str) -> Optional[ViewDescriptor]:
    return _VIEWS_BY_ID.get(view_id)


@dataclass(frozen=True)
class Resolution:
    requested: str
    active: str
    authorized: bool


class NavigationGate:
    """Per-session gate. ``selected`` is the last requested view id."""

    def __init__(self, permissions: PermissionModel, role: Role | str, selected: str = DEFAULT_VIEW) -> None:
        self.permissions = permissions
        self.role = role
        self.selected = selected or DEFAULT_VIEW

    def can_access(self, view_id: str) -> bool:
        view = get_view(view_id)
        if view is None:
            return False
        return self.permissions.allows(self.role, view.required_capability)

    def resolve(self, view_id: str) -> Resolution:
        if self.can_access(view_id):
            return Resolution(requested=view_id, active=view_id, authorized=True)
        return Resolution(requested=view_id, active=DEFAULT_VIEW, authorized=False)

    def select(self, view_id: str) -> Resolution:
        resolution = self.resolve(view_id)
        if not resolution.authorized:
            logger.info("navigation_redirected role=%s view=%s", getattr(self.role, "value", self.role), view_id)
        self.selected = resolution.active
        return resolution

    def current(self) -> Resolution:
        """Re-check the selected view against the matrix as it is now."""
        resolution = self.resolve(self.selected)
        self.selected = resolution.active
        return resolution

    def menu(self) -> List[dict]:
        items: List[dict] = []
        groups: Dict[str, dict] = {}
        for view in VIEW_REGISTRY:
            if not view.in_menu or not self.can_access(view.id):
                continue
            entry = {"id": view.id, "label": view.label, "capability": view.required_capability}
            if view.group is None:
                items.append({**entry, "children": []})
                continue
            group = groups.get(view.group)
            if group is None:
                meta = MENU_GROUPS[view.group]
                group = {"id": meta.id, "label": meta.label, "capability": view.required_capability, "children": []}
                groups[view.group] = group
                items.append(group)
            group["children"].append({**entry, "children": []})
        return items
