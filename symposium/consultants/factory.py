"""
Consultant Factory - Picks the strategy for a stored consultant.

The type is template.api_type, else consultant.consultant_type, else
"pure_llm". Unknown types fall back to the plain conversational
consultant instead of failing.
"""
from typing import Dict, Optional, Type

from symposium.consultants.airtable import AirtableConsultant
from symposium.consultants.base import ConsultantProfile, ConsultantStrategy
from symposium.consultants.config_store import ApiConfigStore
from symposium.consultants.perplexity import PerplexityConsultant
from symposium.consultants.pure_llm import PureLLMConsultant
from symposium.core.logging_config import get_logger
from symposium.database.connection import DatabaseConnection, get_database
from symposium.database.models import ConsultantTemplate
from symposium.llm.client import LLMClient, get_llm_client

logger = get_logger(__name__)

DEFAULT_CONSULTANT_TYPE = "pure_llm"

STRATEGY_TYPES: Dict[str, Type[ConsultantStrategy]] = {
    "pure_llm": PureLLMConsultant,
    "standard": PureLLMConsultant,
    "airtable": AirtableConsultant,
    "perplexity": PerplexityConsultant,
}


def resolve_consultant_type(template_api_type: Optional[str], consultant_type: Optional[str]) -> str:
    """Resolved type tag: template type, else consultant type, else pure_llm."""
    return template_api_type or consultant_type or DEFAULT_CONSULTANT_TYPE


def strategy_class(type_tag: str) -> Type[ConsultantStrategy]:
    """Strategy class for a type tag; unknown tags get the conversational default."""
    cls = STRATEGY_TYPES.get(type_tag)
    if cls is None:
        logger.warning(f"Unknown consultant type '{type_tag}', using {DEFAULT_CONSULTANT_TYPE}")
        return PureLLMConsultant
    return cls


def create_consultant(
    profile: ConsultantProfile,
    db: Optional[DatabaseConnection] = None,
    llm_client: Optional[LLMClient] = None,
    config_store: Optional[ApiConfigStore] = None,
) -> ConsultantStrategy:
    """
    Build the strategy for one consultant.

    Reads the consultant's template row once, if it has one.
    """
    db = db or get_database()

    template_api_type = None
    if profile.template_id is not None:
        with db.get_session() as session:
            template = session.get(ConsultantTemplate, profile.template_id)
            if template is not None:
                template_api_type = template.api_type

    type_tag = resolve_consultant_type(template_api_type, profile.consultant_type)
    cls = strategy_class(type_tag)
    logger.debug(f"Consultant {profile.id} resolved to {cls.__name__} (type={type_tag})")

    return cls(
        profile,
        llm_client or get_llm_client(),
        config_store if config_store is not None else ApiConfigStore(db),
    )
