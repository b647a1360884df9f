"""Tests for the database audit sink, run against the temporary SQLite store."""

import json

import pytest

from symposium.consultants.airtable import AirtableConsultant
from symposium.consultants.base import ConsultantProfile
from symposium.consultants.pipeline import ConsultantPipeline
from symposium.consultants.pure_llm import PureLLMConsultant
from symposium.core.audit import AuditRecord, DatabaseAuditSink
from symposium.core.exceptions import ConfigurationMissingError
from symposium.database.models import ApiInteractionLog

from tests.conftest import FakeConfigStore, FakeLLM


class BrokenDatabase:
    def get_session(self):
        raise RuntimeError("disk unavailable")


@pytest.fixture
def stored_profile(symposium_with_consultant):
    _, consultant_id = symposium_with_consultant
    return ConsultantProfile(id=consultant_id, name="Strategist", model="openai/gpt-4o", system_prompt="p")


def _rows(db):
    with db.get_session() as session:
        return [
            (row.consultant_id, row.api_type, row.success, row.error_message, row.request_data)
            for row in session.query(ApiInteractionLog).order_by(ApiInteractionLog.id)
        ]


def test_successful_turn_writes_one_row(db, stored_profile):
    strategy = PureLLMConsultant(stored_profile, FakeLLM("Start with a waitlist."), FakeConfigStore())

    reply = ConsultantPipeline(strategy, DatabaseAuditSink(db)).process("How do we launch?", "ctx")

    assert reply == "Start with a waitlist."
    rows = _rows(db)
    assert len(rows) == 1
    consultant_id, api_type, success, error_message, request = rows[0]
    assert (consultant_id, api_type, success, error_message) == (stored_profile.id, "pure_llm", True, None)
    assert json.loads(request)["user_message"] == "How do we launch?"


def test_failed_turn_writes_one_row(db, stored_profile, contacts_client):
    strategy = AirtableConsultant(
        stored_profile,
        FakeLLM('{"needsApiCall": true}'),
        FakeConfigStore({}),
        client_factory=lambda api_key, base_id: contacts_client,
    )

    with pytest.raises(ConfigurationMissingError):
        ConsultantPipeline(strategy, DatabaseAuditSink(db)).process("List contacts", "ctx")

    rows = _rows(db)
    assert len(rows) == 1
    _, api_type, success, error_message, request = rows[0]
    assert (api_type, success, error_message) == ("airtable", False, "Airtable configuration not found")
    assert json.loads(request)["api_action"]["action"] == "query_airtable"


def test_missing_table_does_not_change_turn(db, stored_profile):
    ApiInteractionLog.__table__.drop(db.engine)
    strategy = PureLLMConsultant(stored_profile, FakeLLM("Still here."), FakeConfigStore())

    assert ConsultantPipeline(strategy, DatabaseAuditSink(db)).process("Hi", "ctx") == "Still here."


def test_sink_error_keeps_original_failure(stored_profile, contacts_client):
    strategy = AirtableConsultant(
        stored_profile,
        FakeLLM('{"needsApiCall": true}'),
        FakeConfigStore({}),
        client_factory=lambda api_key, base_id: contacts_client,
    )

    with pytest.raises(ConfigurationMissingError, match="Airtable configuration not found"):
        ConsultantPipeline(strategy, DatabaseAuditSink(BrokenDatabase())).process("List contacts", "ctx")


def test_append_swallows_unexpected_errors():
    record = AuditRecord(consultant_id=1, adapter_type="pure_llm", request=None, response=None, success=True)
    DatabaseAuditSink(BrokenDatabase()).append(record)
