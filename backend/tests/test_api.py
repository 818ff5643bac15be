from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from infoco.core.observability import normalize_path
from infoco.core.settings import settings
from infoco.db.base import Base
from infoco.db.session import get_db
from infoco.main import app
from infoco.services.analysis import AnalysisService, get_analysis_service
from infoco.services.gemini import GeminiClient
from infoco.services.news import NEWS_CACHE_CONTROL, NewsService, get_news_service


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    client_instance = TestClient(app)
    try:
        yield client_instance
    finally:
        client_instance.close()
        db.close()
        app.dependency_overrides.clear()


def _login(client, email="admin@infoco.com", password="admin123"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _gemini(handler) -> GeminiClient:
    return GeminiClient("test-key", base_url="https://ai.test/v1beta", transport=httpx.MockTransport(handler))


def _reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_login_returns_role_capabilities(client):
    response = client.post("/api/auth/login", json={"email": "Wendel@Gmail.com", "password": "wendel123"})

    assert response.status_code == 200
    body = response.json()
    assert body["principal"]["role"] == "support"
    assert body["active_view"] == "dashboard"
    assert body["capabilities"]["canManageTasks"] is True
    assert body["capabilities"]["canManageFinance"] is False
    assert "password_hash" not in body["principal"]


def test_login_failure_does_not_say_which_part_was_wrong(client):
    wrong_password = client.post("/api/auth/login", json={"email": "admin@infoco.com", "password": "x"})
    unknown_email = client.post("/api/auth/login", json={"email": "x@infoco.com", "password": "admin123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json()["detail"] == unknown_email.json()["detail"]


def test_logout_ends_the_session(client):
    headers = _login(client)
    assert client.get("/api/auth/me", headers=headers).json()["email"] == "admin@infoco.com"

    assert client.post("/api/auth/logout", headers=headers).status_code == 200

    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert client.get("/api/auth/me").status_code == 401


def test_avatar_update(client):
    headers = _login(client, "fernando@infoco.com", "fernando123")
    response = client.put("/api/auth/avatar", headers=headers, json={"avatar_ref": "data:image/png;base64,AAAA"})
    assert response.status_code == 200
    assert client.get("/api/auth/me", headers=headers).json()["avatar_ref"] == "data:image/png;base64,AAAA"


def test_record_crud_round_trip(client):
    headers = _login(client)

    created = client.post(
        "/api/records/employees",
        headers=headers,
        json={
            "name": "Beatriz Lima",
            "position": "Analista",
            "department": "Tecnologia",
            "email": "beatriz@infoco.com",
            "base_salary": 5200,
        },
    )
    assert created.status_code == 201, created.text
    employee_id = created.json()["id"]

    draft = client.get(f"/api/records/employees/{employee_id}/draft", headers=headers).json()
    draft["position"] = "Analista Sênior"
    updated = client.put(f"/api/records/employees/{employee_id}", headers=headers, json=draft)
    assert updated.status_code == 200
    assert updated.json()["position"] == "Analista Sênior"

    listed = client.get("/api/records/employees", headers=headers).json()
    assert [row["id"] for row in listed][-1] == employee_id

    assert client.delete(f"/api/records/employees/{employee_id}", headers=headers).status_code == 204
    assert client.delete(f"/api/records/employees/{employee_id}", headers=headers).status_code == 204
    assert employee_id not in [row["id"] for row in client.get("/api/records/employees", headers=headers).json()]


def test_validation_errors_name_fields(client):
    headers = _login(client)
    response = client.post("/api/records/tasks", headers=headers, json={"title": ""})

    assert response.status_code == 422
    assert response.json()["detail"]["fields"] == ["employee_id", "title"]


def test_unknown_record_and_collection(client):
    headers = _login(client)
    assert client.put("/api/records/employees/999", headers=headers, json={"name": "x"}).status_code == 404
    assert client.get("/api/records/planets", headers=headers).status_code == 404
    assert client.get("/api/records/notifications", headers=headers).status_code == 404


def test_support_cannot_reach_finance_records(client):
    headers = _login(client, "wendel@gmail.com", "wendel123")

    assert client.get("/api/records/finance", headers=headers).status_code == 403
    assert client.post("/api/records/finance", headers=headers, json={"municipality": "X"}).status_code == 403

    tasks = client.get("/api/records/tasks", headers=headers)
    assert tasks.status_code == 200
    assert tasks.json()[0]["labels"]["employee_id"] == "Fernando Luiz"


def test_system_users_never_expose_hashes(client):
    headers = _login(client)
    users = client.get("/api/records/system_users", headers=headers).json()
    assert len(users) == 4
    assert all("password_hash" not in user for user in users)


def test_update_post_author_defaults_to_poster(client):
    headers = _login(client)
    response = client.post("/api/records/update_posts", headers=headers, json={"content": "Nova versão."})
    assert response.status_code == 201
    assert response.json()["author_id"] == 101
    feed = client.get("/api/records/update_posts", headers=headers).json()
    assert feed[0]["labels"]["author_id"] == "Administrador Sistema"


def test_locked_permission_cells_are_rejected(client):
    headers = _login(client)
    response = client.put("/api/permissions/admin/canViewDashboard", headers=headers, json={"value": False})
    assert response.status_code == 403
    response = client.put("/api/permissions/director/canManageUsers", headers=headers, json={"value": True})
    assert response.status_code == 403


def test_revoked_capability_takes_effect_for_open_sessions(client):
    admin = _login(client)
    coordinator = _login(client, "fernando@infoco.com", "fernando123")

    selected = client.post("/api/navigation/select", headers=coordinator, json={"view": "employees"}).json()
    assert selected["active"] == "employees"
    assert client.get("/api/records/employees", headers=coordinator).status_code == 200

    response = client.put(
        "/api/permissions/coordinator/canManageEmployees", headers=admin, json={"value": False}
    )
    assert response.status_code == 200
    assert response.json()["capabilities"]["canManageEmployees"] is False

    current = client.get("/api/navigation/current", headers=coordinator).json()
    assert current == {"requested": "employees", "active": "dashboard", "authorized": False}
    assert client.get("/api/records/employees", headers=coordinator).status_code == 403
    menu_ids = [item["id"] for item in client.get("/api/navigation/menu", headers=coordinator).json()]
    assert "employees" not in menu_ids


def test_permission_matrix_requires_settings(client):
    support = _login(client, "wendel@gmail.com", "wendel123")
    assert client.get("/api/permissions", headers=support).status_code == 403

    matrix = client.get("/api/permissions", headers=_login(client)).json()
    assert len(matrix["roles"]) == 4
    assert len(matrix["capabilities"]) == 13


def test_navigation_redirects_unauthorized_view(client):
    headers = _login(client, "wendel@gmail.com", "wendel123")
    response = client.post("/api/navigation/select", headers=headers, json={"view": "finance"})
    assert response.json() == {"requested": "finance", "active": "dashboard", "authorized": False}


def test_payroll_generation(client):
    headers = _login(client, "uilber@gmail.com", "uilber123")
    response = client.post("/api/hr/payroll/generate", headers=headers, json={"month_year": "2030-03"})
    assert response.status_code == 201
    assert len(response.json()["created"]) == 5

    listed = client.get("/api/hr/payroll", headers=headers, params={"month_year": "2030-03"})
    assert len(listed.json()) == 5

    pending = client.post("/api/hr/leave/2/status", headers=headers, json={"status": "Pendente"})
    assert pending.status_code == 400
    approved = client.post("/api/hr/leave/2/status", headers=headers, json={"status": "Aprovada"})
    assert approved.json()["status"] == "Aprovada"


def test_login_image_is_public(client):
    assert client.get("/api/settings/login-image").json() == {"image_url": None}
    headers = _login(client)
    client.put("/api/settings/login-image", headers=headers, json={"image_url": "data:image/png;base64,AA"})
    assert client.get("/api/settings/login-image").json()["image_url"] == "data:image/png;base64,AA"


def test_public_tasks_requires_api_key(client, monkeypatch):
    monkeypatch.setattr(settings, "public_api_key", None)
    assert client.get("/api/public/tasks").status_code == 500

    monkeypatch.setattr(settings, "public_api_key", "chave-publica")
    assert client.get("/api/public/tasks").status_code == 401
    assert client.get("/api/public/tasks", headers={"Authorization": "Bearer errada"}).status_code == 401

    response = client.get("/api/public/tasks", headers={"Authorization": "Bearer chave-publica"})
    assert response.status_code == 200
    assert response.headers["cache-control"] == "s-maxage=60, stale-while-revalidate=300"
    first = response.json()["data"][0]
    assert first["employee"] == {"id": 1, "name": "Fernando Luiz", "department": "Técnico"}
    assert "employee_id" not in first


def test_analyze_uses_store_when_no_context(client):
    seen = {}

    def handler(request):
        seen["prompt"] = json.loads(request.content)["contents"][0]["parts"][0]["text"]
        return _reply("Há **5** funcionários.")

    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(_gemini(handler))
    headers = _login(client)

    response = client.post("/api/analyze", headers=headers, json={"userInput": "Quantos funcionários?"})

    assert response.status_code == 200
    assert response.json() == {"response": "Há **5** funcionários."}
    assert "Carlos Silva" in seen["prompt"]


def test_analyze_reports_ai_errors_as_json(client):
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "API key not valid."}})

    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(_gemini(handler))
    headers = _login(client)

    response = client.post(
        "/api/analyze", headers=headers, json={"userInput": "Oi?", "contextData": {"employees": []}}
    )

    assert response.status_code == 401
    assert "error" in response.json()


def test_news_sets_cache_headers(client):
    articles = {"articles": [{"title": "T", "summary": "S", "url": "https://example.com", "sourceTitle": "G1"}]}
    service = NewsService(_gemini(lambda request: _reply(json.dumps(articles))), cache_seconds=60)
    app.dependency_overrides[get_news_service] = lambda: service
    headers = _login(client)

    response = client.get("/api/news", headers=headers)

    assert response.status_code == 200
    assert response.headers["cache-control"] == NEWS_CACHE_CONTROL
    assert response.json()["articles"][0]["source_title"] == "G1"


def test_metrics_are_exposed(client):
    client.get("/healthz")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_server_requests_total" in response.text


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/records/employees/12", "/api/records/employees/{id}"),
        ("/api/documents/NOVA VIÇOSA/Contratos/7", "/api/documents/{municipality}/Contratos/{id}"),
        ("/api/payment-notes/CACULÉ", "/api/payment-notes/{municipality}"),
    ],
)
def test_metric_paths_are_normalized(path, expected):
    assert normalize_path(path) == expected


def test_upload_size_is_measured_from_the_content(client, monkeypatch):
    monkeypatch.setattr(settings, "max_image_size_mb", 1)
    headers = _login(client)
    oversized = "A" * (5 * 1024 * 1024 + 1)

    rejected = client.post(
        "/api/documents/CACULÉ/Contratos",
        headers=headers,
        json={"name": "grande.pdf", "size": 10, "data_url": oversized},
    )
    assert rejected.status_code == 413

    accepted = client.post(
        "/api/documents/CACULÉ/Contratos",
        headers=headers,
        json={"name": "pequeno.pdf", "size": 50 * 1024 * 1024, "data_url": "data:application/pdf;base64,AA"},
    )
    assert accepted.status_code == 201
    listed = client.get("/api/documents/CACULÉ/Contratos", headers=headers).json()
    assert [f["name"] for f in listed] == ["pequeno.pdf"]


def test_login_events_reach_the_security_log(client, caplog):
    with caplog.at_level("INFO", logger="security"):
        client.post("/api/auth/login", json={"email": "admin@infoco.com", "password": "x"})
        _login(client)

    messages = [r.getMessage() for r in caplog.records if r.name == "security"]
    events = [json.loads(message) for message in messages if message.startswith("{")]
    assert [e["event"] for e in events] == ["login_failed", "login_success"]
    assert events[1]["email"] == "admin@infoco.com"
