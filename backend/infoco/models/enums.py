from __future__ import annotations

import enum


class Role(str, enum.Enum):
    ADMIN = "admin"
    DIRECTOR = "director"
    COORDINATOR = "coordinator"
    SUPPORT = "support"


class Capability(str, enum.Enum):
    VIEW_DASHBOARD = "canViewDashboard"
    MANAGE_DOCUMENTS = "canManageDocuments"
    MANAGE_EMPLOYEES = "canManageEmployees"
    MANAGE_TASKS = "canManageTasks"
    MANAGE_FINANCE = "canManageFinance"
    MANAGE_NOTES = "canManageNotes"
    MANAGE_HR = "canManageHR"
    VIEW_REPORTS = "canViewReports"
    MANAGE_INTERNAL_EXPENSES = "canManageInternalExpenses"
    MANAGE_ASSETS = "canManageAssets"
    MANAGE_SETTINGS = "canManageSettings"
    MANAGE_USERS = "canManageUsers"
    POST_UPDATES = "canPostUpdates"


class TaskStatus(str, enum.Enum):
    DONE = "Concluída"
    IN_PROGRESS = "Em Andamento"
    PENDING = "Pendente"


class ExpenseType(str, enum.Enum):
    SALARY = "Salário"
    ADVANCE = "Vale"
    TRAVEL = "Viagem"
    REIMBURSEMENT = "Reembolso"
    OTHER = "Outro"


class PaymentStatus(str, enum.Enum):
    PAID = "Pago"
    PENDING = "Pendente"


class InternalExpenseCategory(str, enum.Enum):
    OFFICE_SUPPLIES = "Material de Escritório"
    FIXED_BILLS = "Contas Fixas"
    MAINTENANCE = "Manutenção"
    MARKETING = "Marketing"
    OTHER = "Outros"


class AssetStatus(str, enum.Enum):
    IN_USE = "Em Uso"
    IN_MAINTENANCE = "Em Manutenção"
    DAMAGED = "Danificado"
    DISPOSED = "Descartado"


class TransactionType(str, enum.Enum):
    RECEIVABLE = "receivable"
    PAYABLE = "payable"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class LeaveType(str, enum.Enum):
    VACATION = "Férias"
    MEDICAL = "Licença Médica"
    OTHER = "Outro"


class LeaveStatus(str, enum.Enum):
    PENDING = "Pendente"
    APPROVED = "Aprovada"
    REJECTED = "Rejeitada"


class NotificationType(str, enum.Enum):
    SYSTEM = "system"
    REMINDER = "reminder"


class ExternalSystemType(str, enum.Enum):
    ACCOUNTING = "Contábil"
    PROCUREMENT = "Licitações"
    WAREHOUSE = "Almoxarifado"
    PROPERTY = "Patrimônio"
    OTHER = "Outro"
