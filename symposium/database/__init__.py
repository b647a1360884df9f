"""
Database module - Persistence for symposiums and consultants.

This module handles:
- Database connection management
- ORM models for symposiums, consultants, messages and knowledge cards
- Table creation and seed data
"""
from symposium.database.connection import DatabaseConnection, get_database
from symposium.database.models import (
    Base,
    Symposium,
    ConsultantTemplate,
    Consultant,
    ExternalApiConfig,
    ApiInteractionLog,
    Message,
    MessageVisibility,
    KnowledgeCard,
    Tag,
)
from symposium.database.init_db import init_tables, drop_tables, seed_default_templates

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    # Models
    "Base",
    "Symposium",
    "ConsultantTemplate",
    "Consultant",
    "ExternalApiConfig",
    "ApiInteractionLog",
    "Message",
    "MessageVisibility",
    "KnowledgeCard",
    "Tag",
    # Init
    "init_tables",
    "drop_tables",
    "seed_default_templates",
]
