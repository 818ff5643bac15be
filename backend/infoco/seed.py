from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, List

from infoco.core.security import get_password_hash
from infoco.core.settings import settings
from infoco.db.base import Base
from infoco.db.session import SessionLocal, engine


def _days_ago(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


_DEFAULT_CREDENTIALS = (
    (101, "admin@infoco.com", "admin123", "Administrador Sistema", "admin", "Administrativo"),
    (102, "fernando@infoco.com", "fernando123", "Fernando Luiz", "coordinator", "Técnico"),
    (103, "wendel@gmail.com", "wendel123", "Wendel Infoco", "support", "Suporte"),
    (104, "uilber@gmail.com", "uilber123", "Uilber Aragão", "director", "SEO"),
)


@lru_cache
def _hashed_default_passwords() -> Dict[int, str]:
    return {user_id: get_password_hash(password) for user_id, _, password, *_ in _DEFAULT_CREDENTIALS}


def default_system_users() -> List[Dict[str, Any]]:
    hashes = _hashed_default_passwords()
    return [
        {
            "id": user_id,
            "email": email,
            "display_name": name,
            "role": role,
            "department": department,
            "password_hash": hashes[user_id],
        }
        for user_id, email, _, name, role, department in _DEFAULT_CREDENTIALS
    ]


def default_update_posts() -> List[Dict[str, Any]]:
    return [
        {
            "id": 1,
            "author_id": 101,
            "content": (
                "Bem-vindo ao novo feed de **Notas de Atualização**! 🎉\n\n"
                "- Agora você pode ver todas as novidades e melhorias do sistema diretamente aqui.\n"
                "- Fique atento para mais atualizações em breve!"
            ),
            "created_at": _days_ago(1),
        },
        {
            "id": 2,
            "author_id": 101,
            "content": (
                "Implementamos o módulo completo de *Gerenciamento de Usuários*. Administradores agora "
                "podem adicionar, editar e remover usuários do sistema na nova aba 'Usuários'."
            ),
            "created_at": _days_ago(3),
        },
    ]


def default_employees() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "name": "Fernando Luiz", "position": "Coordenador Operacional", "department": "Técnico",
         "email": "fernando@infoco.com", "base_salary": 7500},
        {"id": 2, "name": "Wendel Infoco", "position": "Suporte Técnico", "department": "Suporte",
         "email": "wendel@gmail.com", "base_salary": 4500},
        {"id": 3, "name": "Uilber Aragão", "position": "Diretor Executivo", "department": "SEO",
         "email": "uilber@gmail.com", "base_salary": 15000},
        {"id": 4, "name": "Ana Costa", "position": "Analista Financeiro", "department": "Financeiro",
         "email": "ana.costa@infoco.com", "base_salary": 6000},
        {"id": 5, "name": "Carlos Silva", "position": "Advogado", "department": "Jurídico",
         "email": "carlos.silva@infoco.com", "base_salary": 8000},
    ]


def default_tasks() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "employee_id": 1, "title": "Análise de ARPs e Contratos",
         "description": "Revisar e analisar processos administrativos pendentes",
         "date": "2025-07-08", "hours": 8, "status": "Concluída"},
        {"id": 2, "employee_id": 2, "title": "Suporte Sistema",
         "description": "Atendimento a chamados técnicos do sistema",
         "date": "2025-07-09", "hours": 6, "status": "Em Andamento"},
        {"id": 3, "employee_id": 3, "title": "Verificação de Processos Internos",
         "description": "Direção da Infoco", "date": "2025-07-09", "hours": 4, "status": "Pendente"},
        {"id": 4, "employee_id": 4, "title": "Relatório de Fechamento Mensal",
         "description": "Compilar dados financeiros para o relatório de Junho.",
         "date": "2025-07-10", "hours": 7.5, "status": "Em Andamento"},
        {"id": 5, "employee_id": 5, "title": "Análise de Contrato - Cliente X",
         "description": "Revisar cláusulas do novo contrato com o Cliente X.",
         "date": "2025-07-15", "hours": 5, "status": "Pendente"},
    ]


DEPARTMENTS = (
    "Administrativo", "Financeiro", "Recursos Humanos", "Tecnologia", "Jurídico", "Técnico", "Suporte", "SEO",
)


def default_finance() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "municipality": "ALMADINA", "paid": 150000, "pending": 25000, "contract_end_date": "2025-07-31"},
        {"id": 2, "municipality": "NOVA VIÇOSA", "paid": 120000, "pending": 45000, "contract_end_date": "2025-08-15"},
        {"id": 3, "municipality": "CACULÉ", "paid": 95000, "pending": 10000, "contract_end_date": "2025-07-26"},
        {"id": 4, "municipality": "MASCOTE", "paid": 80000, "pending": 30000, "contract_end_date": "2025-09-01"},
        {"id": 5, "municipality": "ITAQUARA", "paid": 180000, "pending": 5000, "contract_end_date": "2025-07-08"},
        {"id": 6, "municipality": "TEIXEIRA DE FREITAS", "paid": 110000, "pending": 12000,
         "contract_end_date": "2025-10-20"},
    ]


def default_employee_expenses() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "employee_id": 1, "type": "Viagem", "description": "Visita ao cliente em Nova Viçosa",
         "amount": 350.75, "date": "2025-07-05", "status": "Pago", "receipt": "nf-viagem-001.pdf"},
        {"id": 2, "employee_id": 2, "type": "Vale", "description": "Adiantamento quinzenal",
         "amount": 500.00, "date": "2025-07-15", "status": "Pendente"},
        {"id": 3, "employee_id": 4, "type": "Reembolso", "description": "Compra de material de escritório",
         "amount": 89.90, "date": "2025-07-02", "status": "Pago", "receipt": "recibo-papelaria.jpg"},
        {"id": 4, "employee_id": 1, "type": "Vale", "description": "Adiantamento quinzenal",
         "amount": 600.00, "date": "2025-07-15", "status": "Pago"},
    ]


def default_internal_expenses() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "description": "Compra de 50 resmas de papel A4", "category": "Material de Escritório",
         "amount": 1250.00, "date": "2025-07-01", "supplier_id": 1},
        {"id": 2, "description": "Conta de energia elétrica - Sede", "category": "Contas Fixas",
         "amount": 850.55, "date": "2025-07-05"},
        {"id": 3, "description": "Manutenção do ar condicionado central", "category": "Manutenção",
         "amount": 450.00, "date": "2025-07-10", "supplier_id": 2},
        {"id": 4, "description": "Campanha de marketing digital - Julho", "category": "Marketing",
         "amount": 2500.00, "date": "2025-07-12", "supplier_id": 3},
    ]


def default_assets() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "name": "Notebook Dell Inspiron 15", "description": "Core i7, 16GB RAM, 512GB SSD",
         "purchase_date": "2024-01-15", "purchase_value": 5500.00, "location": "Sala da Diretoria",
         "status": "Em Uso", "assigned_to_employee_id": 3, "maintenance_log": []},
        {"id": 2, "name": "Impressora HP LaserJet Pro", "description": "Modelo M404dn, Rede",
         "purchase_date": "2023-11-20", "purchase_value": 1800.00, "location": "Recepção",
         "status": "Em Uso", "maintenance_log": []},
        {"id": 3, "name": "Cadeira de Escritório Presidente", "description": "Marca Flexform, cor preta",
         "purchase_date": "2024-02-10", "purchase_value": 950.00, "location": "Sala do Financeiro",
         "status": "Em Manutenção", "assigned_to_employee_id": 4,
         "maintenance_log": [{"id": 1, "date": "2025-07-05", "description": "Troca do pistão a gás", "cost": 120.00}]},
    ]


def default_notifications() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "type": "system", "title": "Vencimento de Contrato",
         "description": "O contrato com o município de ALMADINA vence em breve.",
         "date": _days_ago(2), "event_date": "2025-07-31", "read": False, "link": "municipalities"},
        {"id": 2, "type": "reminder", "title": "Lembrete Pessoal",
         "description": "Preparar apresentação para a reunião de sexta-feira.",
         "date": _days_ago(5), "event_date": "2025-07-11", "read": True, "link": "tasks"},
        {"id": 3, "type": "system", "title": "Tarefa Pendente",
         "description": 'A tarefa "Relatório de Fechamento Mensal" ainda está em andamento.',
         "date": _days_ago(1), "read": False, "link": "tasks"},
    ]


def default_suppliers() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "name": "Papelaria Central", "category": "Material de Escritório", "contact_person": "João Mendes",
         "email": "contato@papelariacentral.com", "phone": "(71) 3333-4444"},
        {"id": 2, "name": "Refrigeração Polar", "category": "Manutenção", "contact_person": "Mariana Lima",
         "email": "suporte@refrigeracaopolar.com", "phone": "(71) 98877-6655"},
        {"id": 3, "name": "Agência Digital Vibe", "category": "Marketing", "contact_person": "Felipe Souza",
         "email": "felipe@vibe.com", "phone": "(11) 91234-5678"},
    ]


def default_transactions() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "type": "receivable", "description": "Recebimento NF #123 - ALMADINA", "amount": 75000,
         "due_date": "2025-07-10", "payment_date": "2025-07-09", "status": "paid", "municipality_id": 1},
        {"id": 2, "type": "receivable", "description": "Recebimento NF #124 - NOVA VIÇOSA", "amount": 60000,
         "due_date": "2025-07-15", "status": "pending", "municipality_id": 2},
        {"id": 3, "type": "payable", "description": "Pagamento Aluguel Escritório", "amount": 4500,
         "due_date": "2025-07-05", "payment_date": "2025-07-05", "status": "paid"},
        {"id": 4, "type": "payable", "description": "Pagamento Fornecedor Papelaria Central", "amount": 1250,
         "due_date": "2025-07-20", "status": "pending"},
    ]


def default_payrolls() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "employee_id": 4, "month_year": "2025-06", "base_salary": 6000, "benefits": 800,
         "deductions": 650, "net_pay": 6150, "pay_date": "2025-07-05"},
        {"id": 2, "employee_id": 1, "month_year": "2025-06", "base_salary": 7500, "benefits": 1200,
         "deductions": 980, "net_pay": 7720, "pay_date": "2025-07-05"},
    ]


def default_leave_requests() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "employee_id": 2, "type": "Férias", "start_date": "2025-08-01", "end_date": "2025-08-15",
         "reason": "Férias anuais programadas", "status": "Aprovada"},
        {"id": 2, "employee_id": 5, "type": "Licença Médica", "start_date": "2025-07-20", "end_date": "2025-07-22",
         "reason": "Consulta médica", "status": "Pendente"},
    ]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write the Infoco demo data into the state table")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables before seeding")
    return parser.parse_args()


def reset_db() -> None:
    if settings.is_production:
        raise RuntimeError("Refusing to reset the database in production.")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def main() -> None:
    # Imported late: the registry imports this module for its defaults.
    from infoco.store.entities import EntityStore
    from infoco.store.state import SqlStateStore

    args = parse_args()
    if args.reset:
        reset_db()
    else:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        store = EntityStore(SqlStateStore(db), seed_defaults=True)
        for name in store.names():
            collection = store.collection(name)
            if collection.key in store.state.keys():
                print(f"{name}: kept existing")
                continue
            records = collection.all()
            collection.save_all(records)
            print(f"{name}: {len(records)} records")
    finally:
        db.close()


if __name__ == "__main__":
    main()
