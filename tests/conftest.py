"""Shared pytest fixtures."""

import os

# Settings are read once and cached; set required values before any import
os.environ.setdefault("OPENROUTER_API_KEY", "test-openrouter-key")
os.environ.setdefault("SEED_DEMO_DATA", "false")

from typing import Any, Dict, List, Optional

import pytest

from symposium.consultants.base import ConsultantProfile
from symposium.core.audit import AuditRecord
from symposium.core.exceptions import DataSourceError
from symposium.database.connection import DatabaseConnection
from symposium.database.init_db import seed_default_templates
from symposium.database.models import Base, Consultant, Symposium


class FakeLLM:
    """LLM double: returns queued replies in order and records every prompt.

    A queued Exception instance is raised instead of returned.
    """

    def __init__(self, *replies: Any):
        self.replies: List[Any] = list(replies)
        self.calls: List[Dict[str, str]] = []

    def chat(self, model: str, prompt: str) -> str:
        self.calls.append({"model": model, "prompt": prompt})
        if not self.replies:
            raise AssertionError("FakeLLM received an unexpected call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class MemoryAuditSink:
    def __init__(self):
        self.records: List[AuditRecord] = []

    def append(self, record: AuditRecord) -> None:
        self.records.append(record)


class FakeConfigStore:
    def __init__(self, configs: Optional[Dict[int, tuple]] = None):
        self.configs = configs or {}
        self.loads = 0

    def load(self, consultant_id: int):
        self.loads += 1
        return self.configs.get(consultant_id)


class FakeAirtableClient:
    """Airtable double with one table."""

    def __init__(self, schema: Dict[str, Any], records: Optional[List[Dict[str, Any]]] = None):
        self.schema = schema
        self.records = records or []
        self.selects: List[tuple] = []

    def list_tables(self):
        return [{"id": "tbl1", "name": self.schema["name"], "fields": self.schema["fields"]}]

    def get_table_schema(self, table_name: str):
        if table_name != self.schema["name"]:
            raise DataSourceError(f'Table "{table_name}" not found', source="airtable")
        return self.schema

    def select(self, table_name: str, query=None):
        self.selects.append((table_name, query))
        return {"records": list(self.records), "offset": None}

    def test_connection(self, table_name=None):
        return {"success": True}


CONTACTS_SCHEMA = {
    "name": "Contacts",
    "fields": [
        {"name": "Name", "type": "singleLineText", "options": {}},
        {"name": "Type", "type": "singleSelect", "options": {}},
        {"name": "Rating", "type": "number", "options": {}},
    ],
}


@pytest.fixture
def db(tmp_path) -> DatabaseConnection:
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'symposium_test.db'}")
    Base.metadata.create_all(connection.engine)
    seed_default_templates(connection)
    yield connection
    connection.close()


@pytest.fixture
def audit_sink() -> MemoryAuditSink:
    return MemoryAuditSink()


@pytest.fixture
def profile() -> ConsultantProfile:
    return ConsultantProfile(
        id=7,
        name="Data Analyst",
        model="openai/gpt-4o",
        system_prompt="You analyze the contacts table.",
    )


@pytest.fixture
def contacts_client() -> FakeAirtableClient:
    return FakeAirtableClient(
        CONTACTS_SCHEMA,
        records=[
            {"id": "rec1", "fields": {"Name": "Ann", "Type": "Doctor"}},
            {"id": "rec2", "fields": {"Name": "Bo", "Type": "Doctor"}},
        ],
    )


@pytest.fixture
def symposium_with_consultant(db):
    """A symposium with one conversational consultant; returns (symposium_id, consultant_id)."""
    with db.get_session() as session:
        symposium = Symposium(name="Launch", description="Go-to-market planning")
        session.add(symposium)
        session.flush()
        consultant = Consultant(
            symposium_id=symposium.id,
            name="Strategist",
            model="openai/gpt-4o",
            system_prompt="You are a launch strategist.",
            consultant_type="pure_llm",
        )
        session.add(consultant)
        session.flush()
        return symposium.id, consultant.id
