"""Registry of the business collections held by the entity store."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from infoco import seed
from infoco.models.enums import (
    AssetStatus,
    Capability,
    ExpenseType,
    LeaveStatus,
    LeaveType,
    NotificationType,
    PaymentStatus,
    Role,
    TaskStatus,
    TransactionStatus,
    TransactionType,
)
from infoco.schemas.asset import Asset
from infoco.schemas.base import Record
from infoco.schemas.employee import Employee, Task
from infoco.schemas.expense import EmployeeExpense, InternalExpense, Supplier
from infoco.schemas.finance import Municipality, Transaction
from infoco.schemas.hr import LeaveRequest, PayrollRecord
from infoco.schemas.integration import ExternalSystem
from infoco.schemas.notification import Notification
from infoco.schemas.update_post import UpdatePost
from infoco.schemas.user import SystemUser

UNKNOWN_LABEL = "Desconhecido"
NOT_AVAILABLE_LABEL = "N/D"

# Field rendered when another record points at one of these collections.
LABEL_FIELDS: Dict[str, str] = {
    "employees": "name",
    "suppliers": "name",
    "finance": "municipality",
    "system_users": "display_name",
}

SENTINELS: Dict[str, str] = {
    "suppliers": NOT_AVAILABLE_LABEL,
}


@dataclass(frozen=True)
class Reference:
    """A foreign id field and the collection it points into."""

    field: str
    target: str


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    key: str
    schema: Type[Record]
    required: Tuple[str, ...]
    view_capability: Capability
    manage_capability: Capability
    defaults: Callable[[], Dict[str, Any]] = dict
    references: Tuple[Reference, ...] = ()
    seed: Optional[Callable[[], List[Dict[str, Any]]]] = None
    prepend: bool = False
    generic_api: bool = True

    def normalize(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self.schema.model_validate(record).model_dump(mode="json")

    def seed_records(self) -> List[Dict[str, Any]]:
        if self.seed is None:
            return []
        return [self.normalize(record) for record in self.seed()]

    def draft_defaults(self) -> Dict[str, Any]:
        return dict(self.defaults())

    def reference(self, field_name: str) -> Optional[Reference]:
        for ref in self.references:
            if ref.field == field_name:
                return ref
        return None


def _today() -> str:
    return date.today().isoformat()


def _employee_ref(field_name: str = "employee_id") -> Reference:
    return Reference(field=field_name, target="employees")


_SPECS: Tuple[CollectionSpec, ...] = (
    CollectionSpec(
        name="employees",
        key="infoco_employees",
        schema=Employee,
        required=("name", "position", "department", "email"),
        view_capability=Capability.MANAGE_EMPLOYEES,
        manage_capability=Capability.MANAGE_EMPLOYEES,
        defaults=lambda: {"name": "", "position": "", "department": seed.DEPARTMENTS[0], "email": "", "base_salary": None},
        seed=seed.default_employees,
    ),
    CollectionSpec(
        name="tasks",
        key="infoco_tasks",
        schema=Task,
        required=("employee_id", "title", "date", "hours", "status"),
        view_capability=Capability.MANAGE_TASKS,
        manage_capability=Capability.MANAGE_TASKS,
        defaults=lambda: {
            "employee_id": None,
            "title": "",
            "description": "",
            "date": _today(),
            "hours": 0,
            "status": TaskStatus.PENDING.value,
        },
        references=(_employee_ref(),),
        seed=seed.default_tasks,
    ),
    CollectionSpec(
        name="finance",
        key="infoco_finance",
        schema=Municipality,
        required=("municipality", "paid", "pending", "contract_end_date"),
        view_capability=Capability.MANAGE_FINANCE,
        manage_capability=Capability.MANAGE_FINANCE,
        defaults=lambda: {
            "municipality": "",
            "paid": 0,
            "pending": 0,
            "contract_end_date": _today(),
            "coat_of_arms_url": None,
        },
        seed=seed.default_finance,
    ),
    CollectionSpec(
        name="employee_expenses",
        key="infoco_employee_expenses",
        schema=EmployeeExpense,
        required=("employee_id", "type", "description", "amount", "date", "status"),
        view_capability=Capability.MANAGE_HR,
        manage_capability=Capability.MANAGE_HR,
        defaults=lambda: {
            "employee_id": None,
            "type": ExpenseType.ADVANCE.value,
            "description": "",
            "amount": 0,
            "date": _today(),
            "status": PaymentStatus.PENDING.value,
            "receipt": None,
        },
        references=(_employee_ref(),),
        seed=seed.default_employee_expenses,
    ),
    CollectionSpec(
        name="internal_expenses",
        key="infoco_internal_expenses",
        schema=InternalExpense,
        required=("description", "category", "amount", "date"),
        view_capability=Capability.MANAGE_INTERNAL_EXPENSES,
        manage_capability=Capability.MANAGE_INTERNAL_EXPENSES,
        defaults=lambda: {
            "description": "",
            "category": "Outros",
            "amount": 0,
            "date": _today(),
            "supplier_id": None,
        },
        references=(Reference(field="supplier_id", target="suppliers"),),
        seed=seed.default_internal_expenses,
    ),
    CollectionSpec(
        name="assets",
        key="infoco_assets",
        schema=Asset,
        required=("name", "purchase_date", "purchase_value", "location", "status"),
        view_capability=Capability.MANAGE_ASSETS,
        manage_capability=Capability.MANAGE_ASSETS,
        defaults=lambda: {
            "name": "",
            "description": "",
            "purchase_date": _today(),
            "purchase_value": 0,
            "location": "",
            "status": AssetStatus.IN_USE.value,
            "assigned_to_employee_id": None,
            "maintenance_log": [],
        },
        references=(_employee_ref("assigned_to_employee_id"),),
        seed=seed.default_assets,
    ),
    CollectionSpec(
        name="suppliers",
        key="infoco_suppliers",
        schema=Supplier,
        required=("name", "category"),
        view_capability=Capability.MANAGE_INTERNAL_EXPENSES,
        manage_capability=Capability.MANAGE_INTERNAL_EXPENSES,
        defaults=lambda: {"name": "", "category": "", "contact_person": "", "email": "", "phone": ""},
        seed=seed.default_suppliers,
    ),
    CollectionSpec(
        name="transactions",
        key="infoco_transactions",
        schema=Transaction,
        required=("type", "description", "amount", "due_date", "status"),
        view_capability=Capability.MANAGE_FINANCE,
        manage_capability=Capability.MANAGE_FINANCE,
        defaults=lambda: {
            "type": TransactionType.RECEIVABLE.value,
            "description": "",
            "amount": 0,
            "due_date": _today(),
            "payment_date": None,
            "status": TransactionStatus.PENDING.value,
            "municipality_id": None,
        },
        references=(Reference(field="municipality_id", target="finance"),),
        seed=seed.default_transactions,
    ),
    CollectionSpec(
        name="payrolls",
        key="infoco_payrolls",
        schema=PayrollRecord,
        required=("employee_id", "month_year", "base_salary", "pay_date"),
        view_capability=Capability.MANAGE_HR,
        manage_capability=Capability.MANAGE_HR,
        defaults=lambda: {
            "employee_id": None,
            "month_year": _today()[:7],
            "base_salary": 0,
            "benefits": 0,
            "deductions": 0,
            "net_pay": 0,
            "pay_date": _today(),
        },
        references=(_employee_ref(),),
        seed=seed.default_payrolls,
    ),
    CollectionSpec(
        name="leave_requests",
        key="infoco_leave_requests",
        schema=LeaveRequest,
        required=("employee_id", "type", "start_date", "end_date", "reason"),
        view_capability=Capability.MANAGE_HR,
        manage_capability=Capability.MANAGE_HR,
        defaults=lambda: {
            "employee_id": None,
            "type": LeaveType.VACATION.value,
            "start_date": _today(),
            "end_date": _today(),
            "reason": "",
            "status": LeaveStatus.PENDING.value,
        },
        references=(_employee_ref(),),
        seed=seed.default_leave_requests,
    ),
    CollectionSpec(
        name="notifications",
        key="infoco_notifications",
        schema=Notification,
        required=("type", "title", "description"),
        view_capability=Capability.VIEW_DASHBOARD,
        manage_capability=Capability.VIEW_DASHBOARD,
        defaults=lambda: {"type": NotificationType.REMINDER.value, "title": "", "description": "", "event_date": None},
        seed=seed.default_notifications,
        prepend=True,
        generic_api=False,
    ),
    CollectionSpec(
        name="update_posts",
        key="infoco_update_posts",
        schema=UpdatePost,
        required=("author_id", "content"),
        view_capability=Capability.VIEW_DASHBOARD,
        manage_capability=Capability.POST_UPDATES,
        defaults=lambda: {"content": ""},
        references=(Reference(field="author_id", target="system_users"),),
        seed=seed.default_update_posts,
        prepend=True,
    ),
    CollectionSpec(
        name="external_systems",
        key="infoco_external_systems",
        schema=ExternalSystem,
        required=("name", "type", "api_url", "access_token", "token_type"),
        view_capability=Capability.MANAGE_SETTINGS,
        manage_capability=Capability.MANAGE_SETTINGS,
        defaults=lambda: {"name": "", "type": "Outro", "api_url": "", "access_token": "", "token_type": "Bearer"},
    ),
    CollectionSpec(
        name="system_users",
        key="infoco_system_users",
        schema=SystemUser,
        required=("email", "display_name", "role", "department"),
        view_capability=Capability.MANAGE_USERS,
        manage_capability=Capability.MANAGE_USERS,
        defaults=lambda: {
            "email": "",
            "display_name": "",
            "role": Role.SUPPORT.value,
            "department": seed.DEPARTMENTS[0],
            "password": "",
        },
        seed=seed.default_system_users,
    ),
)

COLLECTIONS: Dict[str, CollectionSpec] = {spec.name: spec for spec in _SPECS}


def get_spec(name: str) -> CollectionSpec:
    return COLLECTIONS[name]
