"""Unit tests for symposium/consultants/factory.py."""

import pytest

from symposium.consultants.airtable import AirtableConsultant
from symposium.consultants.base import ConsultantProfile
from symposium.consultants.factory import create_consultant, resolve_consultant_type
from symposium.consultants.perplexity import PerplexityConsultant
from symposium.consultants.pure_llm import PureLLMConsultant
from symposium.database.models import ConsultantTemplate

from tests.conftest import FakeConfigStore, FakeLLM


@pytest.mark.parametrize(
    "template_type, consultant_type, expected",
    [
        ("airtable", "perplexity", "airtable"),
        (None, "perplexity", "perplexity"),
        (None, None, "pure_llm"),
        ("", "", "pure_llm"),
    ],
)
def test_resolve_consultant_type(template_type, consultant_type, expected):
    assert resolve_consultant_type(template_type, consultant_type) == expected


def _profile(**overrides):
    fields = dict(id=1, name="C", model="m", system_prompt="p")
    fields.update(overrides)
    return ConsultantProfile(**fields)


@pytest.mark.parametrize(
    "consultant_type, expected_cls",
    [
        ("airtable", AirtableConsultant),
        ("perplexity", PerplexityConsultant),
        ("pure_llm", PureLLMConsultant),
        ("standard", PureLLMConsultant),
        ("crystal_ball", PureLLMConsultant),
        (None, PureLLMConsultant),
    ],
)
def test_type_tag_selects_strategy(db, consultant_type, expected_cls):
    strategy = create_consultant(
        _profile(consultant_type=consultant_type), db=db, llm_client=FakeLLM(), config_store=FakeConfigStore()
    )
    assert type(strategy) is expected_cls


def test_template_type_wins_over_consultant_type(db):
    with db.get_session() as session:
        template_id = session.query(ConsultantTemplate).filter_by(name="airtable_data_assistant").one().id

    strategy = create_consultant(
        _profile(template_id=template_id, consultant_type="perplexity"),
        db=db,
        llm_client=FakeLLM(),
        config_store=FakeConfigStore(),
    )

    assert isinstance(strategy, AirtableConsultant)


def test_missing_template_falls_back_to_consultant_type(db):
    strategy = create_consultant(
        _profile(template_id=999, consultant_type="perplexity"),
        db=db,
        llm_client=FakeLLM(),
        config_store=FakeConfigStore(),
    )
    assert isinstance(strategy, PerplexityConsultant)
