"""Tests for the symposium, knowledge and table query services."""

import pytest

from symposium.core.exceptions import (
    ConfigurationMissingError, NotFoundError, SchemaMismatchError, ValidationError,
)
from symposium.database.models import ConsultantTemplate
from symposium.datasources.formula import FilterCondition
from symposium.services.chat_service import ChatService
from symposium.services.knowledge_service import KnowledgeService
from symposium.services.query_service import TableQueryService
from symposium.services.symposium_service import SymposiumService

from tests.conftest import MemoryAuditSink


def _template_id(db, name):
    with db.get_session() as session:
        return session.query(ConsultantTemplate).filter_by(name=name).one().id


@pytest.fixture
def symposiums(db):
    return SymposiumService(db)


@pytest.fixture
def launch(symposiums):
    return symposiums.create_symposium("Launch", "Go-to-market planning")


# ============================================================
# Symposiums and consultants
# ============================================================

class TestSymposiumService:
    def test_symposium_crud(self, symposiums, launch):
        assert symposiums.get_symposium(launch["id"])["consultants"] == []

        updated = symposiums.update_symposium(launch["id"], description="v2 launch")
        assert updated["description"] == "v2 launch"
        assert updated["name"] == "Launch"

        symposiums.delete_symposium(launch["id"])
        with pytest.raises(NotFoundError):
            symposiums.get_symposium(launch["id"])

    def test_empty_name_rejected(self, symposiums):
        with pytest.raises(ValidationError):
            symposiums.create_symposium("   ")

    def test_templates_are_seeded(self, symposiums):
        types = {t["api_type"] for t in symposiums.list_templates()}
        assert types == {"pure_llm", "airtable", "perplexity"}

    def test_consultant_from_template(self, db, symposiums, launch):
        template_id = _template_id(db, "airtable_data_assistant")

        consultant = symposiums.create_consultant(
            launch["id"], "Data", "openai/gpt-4o", template_id=template_id, consultant_type="perplexity"
        )

        assert consultant["consultant_type"] == "airtable"
        assert consultant["system_prompt"].startswith("You are an Airtable Data Assistant")
        assert symposiums.get_symposium(launch["id"])["consultants"][0]["id"] == consultant["id"]

    def test_consultant_without_prompt_or_template_rejected(self, symposiums, launch):
        with pytest.raises(ValidationError):
            symposiums.create_consultant(launch["id"], "Data", "openai/gpt-4o")

    def test_unknown_consultant_type_rejected(self, symposiums, launch):
        with pytest.raises(ValidationError):
            symposiums.create_consultant(launch["id"], "X", "m", system_prompt="p", consultant_type="oracle")

    def test_update_consultant_keeps_type(self, symposiums, launch):
        consultant = symposiums.create_consultant(
            launch["id"], "Researcher", "m", system_prompt="p", consultant_type="perplexity"
        )

        updated = symposiums.update_consultant(consultant["id"], name="Scout", system_prompt="new")

        assert updated["name"] == "Scout"
        assert updated["system_prompt"] == "new"
        assert updated["consultant_type"] == "perplexity"

    def test_api_config_lifecycle(self, symposiums, launch):
        consultant = symposiums.create_consultant(
            launch["id"], "Researcher", "m", system_prompt="p", consultant_type="perplexity"
        )

        saved = symposiums.save_api_config(consultant["id"], {"api_key": " pplx-1234567890 "})
        assert saved == {
            "consultant_id": consultant["id"],
            "api_type": "perplexity",
            "config": {"api_key": "pplx********"},
        }
        assert symposiums.load_api_config(consultant["id"]) == ("perplexity", {"api_key": "pplx-1234567890"})

        assert symposiums.delete_api_config(consultant["id"]) is True
        with pytest.raises(ConfigurationMissingError):
            symposiums.get_api_config(consultant["id"])

    def test_api_config_requires_template_fields(self, db, symposiums, launch):
        consultant = symposiums.create_consultant(
            launch["id"], "Data", "m", template_id=_template_id(db, "airtable_data_assistant")
        )

        with pytest.raises(ValidationError, match="base_id"):
            symposiums.save_api_config(consultant["id"], {"api_key": "pat"})

    def test_api_config_rejected_for_conversational_consultant(self, symposiums, launch):
        consultant = symposiums.create_consultant(launch["id"], "Chat", "m", system_prompt="p")

        with pytest.raises(ValidationError):
            symposiums.save_api_config(consultant["id"], {"api_key": "x"})

    def test_delete_symposium_removes_messages(self, db, symposiums, launch):
        ChatService(db=db, audit_sink=MemoryAuditSink()).add_message(launch["id"], "hello", is_user=True)

        symposiums.delete_symposium(launch["id"])

        with pytest.raises(NotFoundError):
            ChatService(db=db, audit_sink=MemoryAuditSink()).list_messages(launch["id"])


# ============================================================
# Knowledge base
# ============================================================

class TestKnowledgeService:
    @pytest.fixture
    def knowledge(self, db):
        return KnowledgeService(db)

    def test_cards_for_symposium_include_global_cards(self, knowledge, symposiums, launch):
        other = symposiums.create_symposium("Other")
        knowledge.create_card("Mine", "a", symposium_id=launch["id"])
        knowledge.create_card("Global", "b")
        knowledge.create_card("Theirs", "c", symposium_id=other["id"])

        titles = {c["title"] for c in knowledge.list_cards(symposium_id=launch["id"])}

        assert titles == {"Mine", "Global"}

    def test_visible_only(self, knowledge):
        card = knowledge.create_card("Draft", "x")
        knowledge.set_card_visibility(card["id"], False)

        assert knowledge.list_cards(visible_only=True) == []
        assert len(knowledge.list_cards()) == 1

    def test_card_from_message(self, db, knowledge, launch):
        message = ChatService(db=db, audit_sink=MemoryAuditSink()).add_message(
            launch["id"], "Target indie studios with a free tier first, then upsell.\nMore detail here.",
            is_user=False,
        )

        card = knowledge.card_from_message(message["id"])

        assert card["card_type"] == "from_message"
        assert card["source_message_id"] == message["id"]
        assert card["symposium_id"] == launch["id"]
        assert card["title"] == "Target indie studios with a free tier first, then"

    def test_tags(self, knowledge):
        tag = knowledge.create_tag("pricing", "#ff0000")
        card = knowledge.create_card("Prices", "Tiered", tag_ids=[tag["id"]])
        assert card["tags"] == [tag]

        assert knowledge.set_card_tags(card["id"], [])["tags"] == []

        with pytest.raises(ValidationError):
            knowledge.create_tag("pricing")
        with pytest.raises(ValidationError):
            knowledge.create_tag("other", "red")
        with pytest.raises(NotFoundError):
            knowledge.set_card_tags(card["id"], [999])

    def test_update_and_delete(self, knowledge):
        card = knowledge.create_card("Old", "x")

        assert knowledge.update_card(card["id"], title="New")["title"] == "New"
        knowledge.delete_card(card["id"])

        with pytest.raises(NotFoundError):
            knowledge.delete_card(card["id"])

    @pytest.mark.parametrize("title, content", [("", "x"), ("t", "  ")])
    def test_empty_card_rejected(self, knowledge, title, content):
        with pytest.raises(ValidationError):
            knowledge.create_card(title, content)


# ============================================================
# Structured table queries
# ============================================================

class TestTableQueryService:
    @pytest.fixture
    def data_consultant(self, db, symposiums, launch):
        consultant = symposiums.create_consultant(
            launch["id"], "Data", "m", template_id=_template_id(db, "airtable_data_assistant")
        )
        symposiums.save_api_config(consultant["id"], {"base_id": "app123", "api_key": "pat-1"})
        return consultant["id"]

    @pytest.fixture
    def credentials(self):
        return []

    @pytest.fixture
    def queries(self, symposiums, contacts_client, credentials):
        def factory(api_key, base_id):
            credentials.append((api_key, base_id))
            return contacts_client

        return TableQueryService(symposium_service=symposiums, client_factory=factory)

    def test_run_query(self, queries, data_consultant, contacts_client, credentials):
        result = queries.run_query(
            data_consultant,
            "Contacts",
            conditions=[
                FilterCondition("Type", "=", "Doctor"),
                FilterCondition("Rating", ">", "3", logic="OR"),
            ],
            fields=["Name"],
            max_records=100,
        )

        assert result["formula"] == 'OR({Type} = "Doctor", {Rating} > 3)'
        assert result["record_count"] == 2
        assert "| Name |" in result["markdown"]
        assert credentials == [("pat-1", "app123")]
        _, query = contacts_client.selects[0]
        assert query.max_records == 20
        assert query.fields == ["Name"]

    def test_unknown_field_is_rejected_before_select(self, queries, data_consultant, contacts_client):
        with pytest.raises(SchemaMismatchError):
            queries.run_query(data_consultant, "Contacts", conditions=[FilterCondition("Email", "=", "x")])

        assert contacts_client.selects == []

    def test_table_name_required(self, queries, data_consultant):
        with pytest.raises(ValidationError):
            queries.run_query(data_consultant, "  ")

    def test_list_tables(self, queries, data_consultant):
        tables = queries.list_tables(data_consultant)
        assert tables[0]["name"] == "Contacts"
        assert tables[0]["fields"][0] == {"name": "Name", "type": "singleLineText"}

    def test_non_airtable_consultant_rejected(self, queries, symposiums, launch):
        consultant = symposiums.create_consultant(
            launch["id"], "Scout", "m", system_prompt="p", consultant_type="perplexity"
        )
        symposiums.save_api_config(consultant["id"], {"api_key": "pplx"})

        with pytest.raises(ValidationError):
            queries.list_tables(consultant["id"])

    def test_test_connection_requires_credentials(self, queries):
        with pytest.raises(ValidationError):
            queries.test_connection("", "app1")
        assert queries.test_connection("pat", "app1", "Contacts") == {"success": True}
