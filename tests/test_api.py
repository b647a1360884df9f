"""API tests through FastAPI's TestClient, with services bound to a temporary store."""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from symposium.api import dependencies
from symposium.api.main import app
from symposium.database import connection
from symposium.services.chat_service import ChatService
from symposium.services.knowledge_service import KnowledgeService
from symposium.services.query_service import TableQueryService
from symposium.services.symposium_service import SymposiumService

from tests.conftest import FakeLLM, MemoryAuditSink


class FakeCatalog:
    def list_models(self):
        return [{"id": "openai/gpt-4o", "name": "GPT-4o", "pricing": {"prompt": 0.0025, "completion": 0.01}}]

    def get_credits(self):
        return {"total_credits": 10, "total_usage": 4, "remaining_credits": 6}


@pytest.fixture
def api(db, monkeypatch, contacts_client):
    monkeypatch.setattr(connection, "_db_connection", db)

    llm = FakeLLM()
    audit_sink = MemoryAuditSink()
    symposiums = SymposiumService(db)
    chat = ChatService(db=db, llm_client=llm, audit_sink=audit_sink)
    knowledge = KnowledgeService(db)
    queries = TableQueryService(symposium_service=symposiums, client_factory=lambda api_key, base_id: contacts_client)

    app.dependency_overrides = {
        dependencies.get_symposium_service: lambda: symposiums,
        dependencies.get_chat_service: lambda: chat,
        dependencies.get_knowledge_service: lambda: knowledge,
        dependencies.get_query_service: lambda: queries,
        dependencies.get_llm: lambda: FakeCatalog(),
    }
    with TestClient(app) as client:
        yield SimpleNamespace(client=client, llm=llm, audit_sink=audit_sink, airtable=contacts_client)
    app.dependency_overrides = {}


def _template_id(client, api_type):
    templates = client.get("/api/consultant-templates").json()
    return next(t["id"] for t in templates if t["api_type"] == api_type)


def _symposium_with(client, **consultant):
    symposium = client.post("/api/symposiums", json={"name": "Launch", "description": "v2"}).json()
    body = {"symposium_id": symposium["id"], "name": "Advisor", "model": "openai/gpt-4o"}
    body.update(consultant)
    created = client.post("/api/consultants", json=body)
    assert created.status_code == 201
    return symposium["id"], created.json()["id"]


# ============================================================
# Health
# ============================================================

def test_health(api):
    response = api.client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_readiness(api, db):
    assert api.client.get("/health/ready").json()["database"] == "ok"


def test_readiness_reports_unavailable_database(api, db, monkeypatch):
    monkeypatch.setattr(db, "check_connection", lambda: False)

    response = api.client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


# ============================================================
# Chat
# ============================================================

def test_chat_turn(api):
    symposium_id, consultant_id = _symposium_with(api.client, system_prompt="You are a strategist.")
    api.llm.replies.append("Start with a waitlist.")

    response = api.client.post(
        "/api/chat",
        json={"symposium_id": symposium_id, "consultant_id": consultant_id, "message": "How do we launch?"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user_message"]["content"] == "How do we launch?"
    assert body["consultant_message"]["content"] == "Start with a waitlist."
    assert body["consultant_message"]["consultant_name"] == "Advisor"

    messages = api.client.get("/api/messages", params={"symposium_id": symposium_id}).json()
    assert [m["is_user"] for m in messages] == [True, False]


def test_chat_with_unconfigured_data_consultant(api):
    symposium_id, consultant_id = _symposium_with(
        api.client, template_id=_template_id(api.client, "airtable")
    )
    api.llm.replies.append('{"needsApiCall": true, "filterByFormula": ""}')

    response = api.client.post(
        "/api/chat",
        json={"symposium_id": symposium_id, "consultant_id": consultant_id, "message": "List contacts"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "configuration_missing"
    messages = api.client.get("/api/messages", params={"symposium_id": symposium_id}).json()
    assert [m["content"] for m in messages] == ["List contacts"]
    assert api.audit_sink.records[0].success is False


def test_chat_unknown_symposium(api):
    response = api.client.post("/api/chat", json={"symposium_id": 404, "consultant_id": 1, "message": "Hi"})

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_chat_rejects_empty_message(api):
    response = api.client.post("/api/chat", json={"symposium_id": 1, "consultant_id": 1, "message": ""})
    assert response.status_code == 422


# ============================================================
# Consultants and API configuration
# ============================================================

def test_api_config_is_masked(api):
    _, consultant_id = _symposium_with(api.client, template_id=_template_id(api.client, "airtable"))

    saved = api.client.put(
        f"/api/consultants/{consultant_id}/api-config",
        json={"config": {"base_id": "app123", "api_key": "pat-1234567890", "table_name": "Contacts"}},
    )
    assert saved.status_code == 200
    assert saved.json()["config"]["api_key"] == "pat-********"

    fetched = api.client.get(f"/api/consultants/{consultant_id}/api-config").json()
    assert fetched["api_type"] == "airtable"
    assert fetched["config"]["base_id"] == "app123"
    assert "1234567890" not in str(fetched)

    assert api.client.delete(f"/api/consultants/{consultant_id}/api-config").status_code == 200
    assert api.client.get(f"/api/consultants/{consultant_id}/api-config").status_code == 400


def test_api_config_missing_fields(api):
    _, consultant_id = _symposium_with(api.client, template_id=_template_id(api.client, "airtable"))

    response = api.client.put(f"/api/consultants/{consultant_id}/api-config", json={"config": {"api_key": "x"}})

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_structured_query(api):
    _, consultant_id = _symposium_with(api.client, template_id=_template_id(api.client, "airtable"))
    api.client.put(
        f"/api/consultants/{consultant_id}/api-config",
        json={"config": {"base_id": "app123", "api_key": "pat"}},
    )

    response = api.client.post(
        f"/api/consultants/{consultant_id}/query",
        json={
            "table_name": "Contacts",
            "conditions": [{"field": "Name", "operator": "contains", "value": "An"}],
            "max_records": 5,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["formula"] == 'FIND("An", {Name})'
    assert body["record_count"] == 2
    assert api.airtable.selects[0][1].max_records == 5


def test_structured_query_unknown_field(api):
    _, consultant_id = _symposium_with(api.client, template_id=_template_id(api.client, "airtable"))
    api.client.put(
        f"/api/consultants/{consultant_id}/api-config",
        json={"config": {"base_id": "app123", "api_key": "pat"}},
    )

    response = api.client.post(
        f"/api/consultants/{consultant_id}/query",
        json={"table_name": "Contacts", "conditions": [{"field": "Email", "operator": "=", "value": "x"}]},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "schema_mismatch"


# ============================================================
# Messages and knowledge base
# ============================================================

def test_visibility_and_card_from_message(api):
    symposium_id, consultant_id = _symposium_with(api.client, system_prompt="p")
    message = api.client.post(
        "/api/messages", json={"symposium_id": symposium_id, "content": "Price at $9/month"}
    ).json()

    hidden = api.client.post(
        "/api/message-visibility",
        json={"message_id": message["id"], "consultant_id": consultant_id, "is_hidden": True},
    )
    assert hidden.json()["is_hidden"] is True

    card = api.client.post("/api/knowledge-cards/from-message", json={"message_id": message["id"]})
    assert card.status_code == 201
    assert card.json()["title"] == "Price at $9/month"

    cards = api.client.get("/api/knowledge-cards", params={"symposium_id": symposium_id}).json()
    assert [c["card_type"] for c in cards] == ["from_message"]

    cleared = api.client.post("/api/clear-messages", json={"symposium_id": symposium_id}).json()
    assert cleared["detail"]["deleted"] == 1


def test_model_catalogue(api):
    assert api.client.get("/api/models").json()[0]["id"] == "openai/gpt-4o"
    assert api.client.get("/api/auth").json()["remaining_credits"] == 6
