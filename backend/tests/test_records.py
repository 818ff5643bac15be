from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from infoco.core.errors import AuthenticationError, NotFoundError, ValidationError
from infoco.core.security import verify_password
from infoco.core.session import SessionProvider
from infoco.db.base import Base
from infoco.models.enums import Role
from infoco.services.records import controller_for, resolve
from infoco.store.entities import EntityStore
from infoco.store.state import MemoryStateStore, SqlStateStore


@pytest.fixture()
def store():
    return EntityStore(MemoryStateStore())


def _new_employee(controller, **overrides):
    draft = controller.begin_create()
    draft.update(
        name="Beatriz Lima",
        position="Analista de Sistemas",
        department="Tecnologia",
        email="beatriz.lima@infoco.com",
        base_salary=5200,
    )
    draft.update(overrides)
    return controller.submit(draft)


def test_list_keeps_insertion_order(store):
    controller = controller_for(store, "employees")
    assert [r["id"] for r in controller.list()] == [1, 2, 3, 4, 5]

    created = _new_employee(controller)

    assert created["id"] == 6
    assert controller.list()[-1] == created


def test_ids_are_not_reused_after_delete(store):
    controller = controller_for(store, "employees")
    first = _new_employee(controller)
    controller.remove(first["id"])

    second = _new_employee(controller, email="outra@infoco.com")

    assert second["id"] == first["id"] + 1


def test_absent_collection_reads_as_empty_without_seeds():
    store = EntityStore(MemoryStateStore(), seed_defaults=False)
    controller = controller_for(store, "tasks")
    assert controller.list() == []


@pytest.mark.parametrize(
    "name",
    [
        "employees",
        "tasks",
        "finance",
        "employee_expenses",
        "internal_expenses",
        "assets",
        "suppliers",
        "transactions",
        "payrolls",
        "leave_requests",
        "system_users",
    ],
)
def test_submitting_an_untouched_edit_changes_nothing(store, name):
    controller = controller_for(store, name)
    before = store.collection(name).all()

    controller.submit(controller.begin_edit(before[0]["id"]))

    assert store.collection(name).all() == before


def test_edit_replaces_in_place(store):
    controller = controller_for(store, "finance")
    draft = controller.begin_edit(3)
    draft["pending"] = 0

    updated = controller.submit(draft)

    assert updated["pending"] == 0
    assert [r["id"] for r in controller.list()] == [1, 2, 3, 4, 5, 6]
    assert controller.get(3)["municipality"] == "CACULÉ"


def test_missing_required_fields_leave_store_untouched(store):
    controller = controller_for(store, "tasks")
    before = controller.list()
    draft = controller.begin_create()
    draft["title"] = "   "

    with pytest.raises(ValidationError) as exc:
        controller.submit(draft)

    assert exc.value.fields == ["employee_id", "title"]
    assert controller.list() == before
    assert store.state.read("infoco_tasks") is None


def test_invalid_value_is_reported_by_field(store):
    controller = controller_for(store, "employees")
    with pytest.raises(ValidationError) as exc:
        _new_employee(controller, email="sem-arroba")
    assert exc.value.fields == ["email"]
    assert len(controller.list()) == 5


def test_editing_unknown_record_raises(store):
    controller = controller_for(store, "employees")
    with pytest.raises(NotFoundError):
        controller.submit({"id": 999, "name": "Fantasma"})
    with pytest.raises(NotFoundError):
        controller.begin_edit(999)


def test_remove_is_idempotent(store):
    controller = controller_for(store, "suppliers")
    controller.remove(2)
    after_first = controller.list()
    controller.remove(2)
    controller.remove(999)
    assert controller.list() == after_first
    assert [r["id"] for r in after_first] == [1, 3]


def test_dangling_references_render_sentinels(store):
    employees = controller_for(store, "employees")
    tasks = controller_for(store, "tasks")
    employees.remove(1)

    rows = {row["id"]: row for row in tasks.rows()}
    assert rows[1]["employee_id"] == 1
    assert rows[1]["labels"]["employee_id"] == "Desconhecido"
    assert rows[2]["labels"]["employee_id"] == "Wendel Infoco"


def test_missing_supplier_renders_not_available(store):
    rows = {row["id"]: row for row in controller_for(store, "internal_expenses").rows()}
    assert rows[1]["labels"]["supplier_id"] == "Papelaria Central"
    assert rows[2]["labels"]["supplier_id"] == "N/D"
    assert resolve(store, 42, "suppliers") == "N/D"
    assert resolve(store, None, "employees") == "Desconhecido"


def test_new_user_password_is_hashed_and_hidden(store):
    controller = controller_for(store, "system_users")
    draft = controller.begin_create()
    draft.update(
        email="maria@infoco.com",
        display_name="Maria Souza",
        role="coordinator",
        department="Financeiro",
        password="segredo1",
    )

    created = controller.submit(draft)

    assert created["id"] == 105
    assert "password" not in created
    assert "password_hash" not in created
    stored = store.collection("system_users").get(created["id"])
    assert verify_password("segredo1", stored["password_hash"])
    principal = SessionProvider(store.state, store).authenticate("MARIA@infoco.com", "segredo1")
    assert principal.role == Role.COORDINATOR


def test_new_user_requires_password(store):
    controller = controller_for(store, "system_users")
    draft = controller.begin_create()
    draft.update(email="joao@infoco.com", display_name="João", role="support", department="Suporte")
    with pytest.raises(ValidationError) as exc:
        controller.submit(draft)
    assert exc.value.fields == ["password"]


def test_blank_password_on_edit_keeps_hash(store):
    controller = controller_for(store, "system_users")
    old_hash = store.collection("system_users").get(101)["password_hash"]
    draft = controller.begin_edit(101)
    assert draft["password"] == ""
    draft["display_name"] = "Administrador Infoco"

    controller.submit(draft)

    stored = store.collection("system_users").get(101)
    assert stored["display_name"] == "Administrador Infoco"
    assert stored["password_hash"] == old_hash


def test_password_change_replaces_hash(store):
    controller = controller_for(store, "system_users")
    draft = controller.begin_edit(103)
    draft["password"] = "nova-senha"
    controller.submit(draft)

    provider = SessionProvider(store.state, store)
    with pytest.raises(AuthenticationError):
        provider.authenticate("wendel@gmail.com", "wendel123")
    assert provider.authenticate("wendel@gmail.com", "nova-senha").user_id == 103


def test_duplicate_email_is_rejected(store):
    controller = controller_for(store, "system_users")
    draft = controller.begin_create()
    draft.update(
        email="Fernando@Infoco.com",
        display_name="Outro Fernando",
        role="support",
        department="Suporte",
        password="x1",
    )
    with pytest.raises(ValidationError) as exc:
        controller.submit(draft)
    assert exc.value.fields == ["email"]
    assert exc.value.message == "E-mail já cadastrado."


def test_update_post_keeps_creation_time(store):
    controller = controller_for(store, "update_posts")
    created = controller.submit({"author_id": 101, "content": "Novo módulo de patrimônio."})
    assert controller.list()[0]["id"] == created["id"]

    draft = controller.begin_edit(created["id"])
    draft["content"] = "Novo módulo de patrimônio disponível."
    edited = controller.submit(draft)

    assert edited["created_at"] == created["created_at"]
    assert edited["content"].endswith("disponível.")
    assert controller.rows()[0]["labels"]["author_id"] == "Administrador Sistema"


def test_first_record_in_empty_collection():
    store = EntityStore(MemoryStateStore(), seed_defaults=False)
    controller = controller_for(store, "tasks")

    created = controller.submit(
        {"employee_id": 1, "title": "T", "date": "2025-07-01", "hours": 2, "status": "Pendente"}
    )

    assert created["id"] > 0
    assert controller.list() == [created]


def test_sql_store_does_not_alias_written_values():
    engine = create_engine("sqlite+pysqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    with sessionmaker(bind=engine)() as db:
        state = SqlStateStore(db)
        value = {"Contratos": [{"id": 1, "name": "contrato.pdf"}]}

        state.write("infoco_documents", value)
        value["Contratos"].append({"id": 2, "name": "outro.pdf"})

        assert state.read("infoco_documents") == {"Contratos": [{"id": 1, "name": "contrato.pdf"}]}
