"""
Database Initialization - Create tables and seed data.

init_tables() runs at application startup. It creates missing tables and
inserts the built-in consultant templates, plus an example symposium when
SEED_DEMO_DATA is enabled.
"""
import json
from typing import Optional

from symposium.core.config import get_settings
from symposium.core.logging_config import get_logger
from symposium.database.connection import DatabaseConnection, get_database
from symposium.database.models import (
    Base, Consultant, ConsultantTemplate, Message, Symposium,
)

logger = get_logger(__name__)


DEFAULT_TEMPLATES = [
    {
        "name": "pure_llm",
        "display_name": "Pure LLM Assistant",
        "description": "A conversational AI assistant powered purely by language models without external API integrations.",
        "api_type": "pure_llm",
        "default_system_prompt": (
            "You are a helpful AI assistant. Provide thoughtful, accurate responses to user "
            "questions and engage in meaningful conversations."
        ),
        "required_config_fields": [],
        "icon": "🤖",
    },
    {
        "name": "airtable_data_assistant",
        "display_name": "Airtable Data Assistant",
        "description": "Specialized consultant for querying and analyzing data from Airtable databases.",
        "api_type": "airtable",
        "default_system_prompt": (
            "You are an Airtable Data Assistant specialized in querying and analyzing data from "
            "Airtable databases. You help users retrieve information from their Airtable bases by "
            "interpreting natural language queries and converting them into appropriate database operations."
        ),
        "required_config_fields": ["base_id", "api_key"],
        "icon": "📊",
    },
    {
        "name": "perplexity_research_assistant",
        "display_name": "Perplexity Research Assistant",
        "description": "Research assistant that uses Perplexity AI for web searches and current information.",
        "api_type": "perplexity",
        "default_system_prompt": (
            "You are a research assistant that helps users find current information and conduct "
            "research using web search capabilities. You provide accurate, up-to-date information "
            "with proper source attribution."
        ),
        "required_config_fields": ["api_key"],
        "icon": "🔍",
    },
]


DEMO_CONSULTANTS = [
    (
        "Market Research Analyst",
        "anthropic/claude-3.5-sonnet",
        "You are a senior market research analyst with 15+ years of experience in SaaS and tech "
        "markets. Your expertise includes competitive analysis, market sizing, customer segmentation, "
        "and identifying market opportunities.",
    ),
    (
        "Product Marketing Strategist",
        "openai/gpt-4o",
        "You are a product marketing strategist specializing in SaaS product launches. You excel at "
        "product positioning, messaging, pricing strategy, and go-to-market planning.",
    ),
    (
        "Growth Marketing Expert",
        "google/gemini-pro-1.5",
        "You are a growth marketing expert focused on scalable customer acquisition and retention "
        "strategies across digital channels.",
    ),
]


def seed_default_templates(db: DatabaseConnection) -> int:
    """
    Insert built-in templates that are not present yet.

    Returns:
        Number of templates created
    """
    created = 0
    with db.get_session() as session:
        existing = {name for (name,) in session.query(ConsultantTemplate.name).all()}
        for template in DEFAULT_TEMPLATES:
            if template["name"] in existing:
                continue
            session.add(ConsultantTemplate(
                name=template["name"],
                display_name=template["display_name"],
                description=template["description"],
                api_type=template["api_type"],
                default_system_prompt=template["default_system_prompt"],
                required_config_fields=json.dumps(template["required_config_fields"]),
                icon=template["icon"],
            ))
            created += 1
            logger.info(f"Created template: {template['display_name']}")
    return created


def seed_demo_data(db: DatabaseConnection) -> bool:
    """
    Create the example symposium on an empty database.

    Returns:
        True if demo data was written
    """
    with db.get_session() as session:
        if session.query(Symposium).count() > 0:
            logger.info("Database already has data, skipping demo seed")
            return False

        symposium = Symposium(
            name="Digital Product Launch Strategy",
            description=(
                "A collaborative symposium to develop a go-to-market strategy for a new SaaS "
                "product: market research, positioning, pricing, channels and launch timeline."
            ),
        )
        session.add(symposium)
        session.flush()

        for name, model, prompt in DEMO_CONSULTANTS:
            session.add(Consultant(
                symposium_id=symposium.id,
                name=name,
                model=model,
                system_prompt=prompt,
                consultant_type="pure_llm",
            ))

        session.add(Message(
            symposium_id=symposium.id,
            consultant_id=None,
            is_user=False,
            content=(
                "Welcome to the Digital Product Launch Strategy symposium! Ask any consultant "
                "about their area of expertise, or pose questions to the group."
            ),
        ))

    logger.info("Demo symposium created")
    return True


def init_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Create all tables if they don't exist and seed templates.

    Returns:
        True if tables were created successfully
    """
    db = db or get_database()
    try:
        Base.metadata.create_all(db.engine)
        seed_default_templates(db)
        if get_settings().seed_demo_data:
            seed_demo_data(db)
        logger.info("Symposium tables initialized successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize tables: {e}")
        raise


def drop_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Drop all tables (use with caution!).

    Returns:
        True if tables were dropped successfully
    """
    db = db or get_database()
    Base.metadata.drop_all(db.engine)
    logger.warning("Symposium tables dropped")
    return True


if __name__ == "__main__":
    print("Initializing symposium tables...")
    init_tables()
    print("Done!")
