"""Tests for symposium/services/chat_service.py against a temporary SQLite store."""

import pytest

from symposium.core.exceptions import ConfigurationMissingError, NotFoundError, ValidationError
from symposium.database.models import Consultant, Symposium
from symposium.services.chat_service import ChatService
from symposium.services.knowledge_service import KnowledgeService

from tests.conftest import FakeConfigStore, FakeLLM


def _service(db, llm, audit_sink, configs=None):
    return ChatService(db=db, llm_client=llm, audit_sink=audit_sink, config_store=FakeConfigStore(configs))


def _add_consultant(db, symposium_id, name, consultant_type):
    with db.get_session() as session:
        consultant = Consultant(
            symposium_id=symposium_id,
            name=name,
            model="openai/gpt-4o",
            system_prompt=f"You are {name}.",
            consultant_type=consultant_type,
        )
        session.add(consultant)
        session.flush()
        return consultant.id


def test_turn_stores_both_messages(db, audit_sink, symposium_with_consultant):
    symposium_id, consultant_id = symposium_with_consultant
    llm = FakeLLM("Start with a waitlist.")
    service = _service(db, llm, audit_sink)

    result = service.handle_turn(symposium_id, consultant_id, "  How do we launch?  ")

    assert result.user_message["content"] == "How do we launch?"
    assert result.user_message["is_user"] is True
    assert result.consultant_message["content"] == "Start with a waitlist."
    assert result.consultant_message["consultant_name"] == "Strategist"
    assert [m["content"] for m in service.list_messages(symposium_id)] == [
        "How do we launch?",
        "Start with a waitlist.",
    ]
    assert len(audit_sink.records) == 1 and audit_sink.records[0].success


def test_context_carries_history_and_cards(db, audit_sink, symposium_with_consultant):
    symposium_id, consultant_id = symposium_with_consultant
    llm = FakeLLM("Noted.")
    service = _service(db, llm, audit_sink)
    service.add_message(symposium_id, "Budget is 10k", is_user=True)
    service.add_message(symposium_id, "Then focus on organic channels.", is_user=False, consultant_id=consultant_id)
    knowledge = KnowledgeService(db)
    knowledge.create_card("Audience", "Indie game developers", symposium_id=symposium_id)
    knowledge.create_card("House style", "Short answers", symposium_id=None)
    hidden_card = knowledge.create_card("Draft", "Do not use", symposium_id=symposium_id)
    knowledge.set_card_visibility(hidden_card["id"], False)

    service.handle_turn(symposium_id, consultant_id, "What next?")

    prompt = llm.calls[0]["prompt"]
    assert 'symposium called "Launch"' in prompt
    assert "User: Budget is 10k" in prompt
    assert "Strategist: Then focus on organic channels." in prompt
    assert "### Audience\nIndie game developers" in prompt
    assert "### House style" in prompt
    assert "Do not use" not in prompt


def test_hidden_messages_are_excluded_for_that_consultant(db, audit_sink, symposium_with_consultant):
    symposium_id, consultant_id = symposium_with_consultant
    other_id = _add_consultant(db, symposium_id, "Analyst", "pure_llm")
    llm = FakeLLM("A", "B")
    service = _service(db, llm, audit_sink)
    secret = service.add_message(symposium_id, "Secret pricing idea", is_user=True)
    service.set_visibility(secret["id"], consultant_id, True)

    service.handle_turn(symposium_id, consultant_id, "Thoughts?")
    service.handle_turn(symposium_id, other_id, "Thoughts?")

    assert "Secret pricing idea" not in llm.calls[0]["prompt"]
    assert "Secret pricing idea" in llm.calls[1]["prompt"]


def test_history_is_limited_to_most_recent(db, audit_sink, symposium_with_consultant):
    symposium_id, consultant_id = symposium_with_consultant
    llm = FakeLLM("ok")
    service = _service(db, llm, audit_sink)
    service.context_limit = 2
    for text in ("first", "second", "third"):
        service.add_message(symposium_id, text, is_user=True)

    service.handle_turn(symposium_id, consultant_id, "fourth")

    prompt = llm.calls[0]["prompt"]
    assert "User: first" not in prompt
    assert prompt.index("User: second") < prompt.index("User: third")


def test_data_consultant_with_malformed_plan_still_replies(db, audit_sink, symposium_with_consultant):
    symposium_id, _ = symposium_with_consultant
    consultant_id = _add_consultant(db, symposium_id, "Data", "airtable")
    llm = FakeLLM("I think you want the contacts table.", "Which table should I look at?")
    service = _service(db, llm, audit_sink)

    result = service.handle_turn(symposium_id, consultant_id, "Show me the data")

    assert result.consultant_message["content"] == "Which table should I look at?"
    assert len(service.list_messages(symposium_id)) == 2


def test_pipeline_failure_keeps_user_message(db, audit_sink, symposium_with_consultant):
    symposium_id, _ = symposium_with_consultant
    consultant_id = _add_consultant(db, symposium_id, "Data", "airtable")
    llm = FakeLLM('{"needsApiCall": true, "filterByFormula": ""}')
    service = _service(db, llm, audit_sink)

    with pytest.raises(ConfigurationMissingError):
        service.handle_turn(symposium_id, consultant_id, "List contacts")

    messages = service.list_messages(symposium_id)
    assert [m["content"] for m in messages] == ["List contacts"]
    assert [r.success for r in audit_sink.records] == [False]


@pytest.mark.parametrize("message", ["", "   "])
def test_empty_message_is_rejected(db, audit_sink, symposium_with_consultant, message):
    symposium_id, consultant_id = symposium_with_consultant
    with pytest.raises(ValidationError):
        _service(db, FakeLLM(), audit_sink).handle_turn(symposium_id, consultant_id, message)


def test_unknown_consultant(db, audit_sink, symposium_with_consultant):
    symposium_id, _ = symposium_with_consultant
    with pytest.raises(NotFoundError):
        _service(db, FakeLLM(), audit_sink).handle_turn(symposium_id, 999, "Hi")


def test_consultant_from_other_symposium(db, audit_sink, symposium_with_consultant):
    _, consultant_id = symposium_with_consultant
    with db.get_session() as session:
        other = Symposium(name="Other", description="")
        session.add(other)
        session.flush()
        other_id = other.id

    with pytest.raises(ValidationError):
        _service(db, FakeLLM(), audit_sink).handle_turn(other_id, consultant_id, "Hi")


def test_message_management(db, audit_sink, symposium_with_consultant):
    symposium_id, consultant_id = symposium_with_consultant
    service = _service(db, FakeLLM(), audit_sink)
    message = service.add_message(symposium_id, "draft", is_user=True)

    edited = service.edit_message(message["id"], "final")
    assert edited["content"] == "final"
    assert edited["updated_at"] is not None

    visibility = service.set_visibility(message["id"], consultant_id, True)
    assert visibility == {"message_id": message["id"], "consultant_id": consultant_id, "is_hidden": True}
    assert service.list_messages(symposium_id)[0]["visibility"] == [
        {"consultant_id": consultant_id, "is_hidden": True}
    ]

    service.add_message(symposium_id, "another", is_user=True)
    service.delete_message(message["id"])
    assert [m["content"] for m in service.list_messages(symposium_id)] == ["another"]

    assert service.clear_messages(symposium_id) == 1
    assert service.list_messages(symposium_id) == []

    with pytest.raises(NotFoundError):
        service.delete_message(message["id"])
