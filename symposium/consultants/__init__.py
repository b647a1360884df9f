"""
Consultants module - Strategies and the per-turn pipeline.

This module handles:
- Consultant types (conversational, Airtable, web search)
- Strategy selection from stored configuration
- The interpret/execute/format pipeline with audit records
- Stored API configuration
"""
from symposium.consultants.airtable import AirtableConsultant
from symposium.consultants.base import (
    APOLOGY_MESSAGE,
    ApiAction,
    ConsultantProfile,
    ConsultantStrategy,
)
from symposium.consultants.config_store import ApiConfigStore
from symposium.consultants.factory import create_consultant, resolve_consultant_type
from symposium.consultants.formatting import RecordFormatter
from symposium.consultants.perplexity import PerplexityConsultant
from symposium.consultants.pipeline import ConsultantPipeline
from symposium.consultants.pure_llm import PureLLMConsultant

__all__ = [
    "APOLOGY_MESSAGE",
    "ApiAction",
    "ConsultantProfile",
    "ConsultantStrategy",
    "PureLLMConsultant",
    "AirtableConsultant",
    "PerplexityConsultant",
    "ConsultantPipeline",
    "create_consultant",
    "resolve_consultant_type",
    "ApiConfigStore",
    "RecordFormatter",
]
